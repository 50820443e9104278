"""
Service record routes.
"""
from fastapi import APIRouter, Depends, status

from garage.dependencies import get_service_repository
from garage.repositories import ServiceRepository
from garage.schemas.service import ServiceCreate, ServiceUpdate

router = APIRouter(prefix="/services", tags=["services"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_service(
    service: ServiceCreate,
    repo: ServiceRepository = Depends(get_service_repository),
):
    """
    Record a service performed on a vehicle.
    """
    created = await repo.create(
        service.vehicle_id,
        service.service_date,
        service.description,
        service.cost,
        service.status,
    )
    return {"message": "Service record created successfully", "service": created}


@router.get("")
async def get_services(repo: ServiceRepository = Depends(get_service_repository)):
    """
    Get all service records, latest service date first.
    """
    services = await repo.list()
    return {
        "message": "Services retrieved successfully",
        "services": services,
        "count": len(services),
    }


@router.get("/vehicle/{vehicle_id}")
async def get_vehicle_services(
    vehicle_id: int,
    repo: ServiceRepository = Depends(get_service_repository),
):
    services = await repo.list_by_vehicle(vehicle_id)
    return {
        "message": "Vehicle service history retrieved successfully",
        "services": services,
        "count": len(services),
        "vehicle_id": vehicle_id,
    }


@router.get("/customer/{customer_id}")
async def get_customer_services(
    customer_id: int,
    repo: ServiceRepository = Depends(get_service_repository),
):
    services = await repo.list_by_customer(customer_id)
    return {
        "message": "Customer service history retrieved successfully",
        "services": services,
        "count": len(services),
        "customer_id": customer_id,
    }


@router.get("/search/{query}")
async def search_services(
    query: str,
    repo: ServiceRepository = Depends(get_service_repository),
):
    services = await repo.search(query)
    return {
        "message": "Service search completed successfully",
        "services": services,
        "count": len(services),
        "searchQuery": query,
    }


@router.get("/stats/summary")
async def service_stats(repo: ServiceRepository = Depends(get_service_repository)):
    """
    Service count and total revenue.
    """
    return {
        "message": "Service statistics retrieved successfully",
        "stats": await repo.stats(),
    }


@router.get("/{service_id}")
async def get_service(
    service_id: int,
    repo: ServiceRepository = Depends(get_service_repository),
):
    """
    Get a service record with its vehicle and customer.
    """
    return {
        "message": "Service retrieved successfully",
        "service": await repo.get(service_id),
    }


@router.put("/{service_id}")
async def update_service(
    service_id: int,
    service: ServiceUpdate,
    repo: ServiceRepository = Depends(get_service_repository),
):
    """
    Update a service record.
    """
    updated = await repo.update(
        service_id,
        service.vehicle_id,
        service.service_date,
        service.description,
        service.cost,
        service.status,
    )
    return {"message": "Service record updated successfully", "service": updated}


@router.delete("/{service_id}")
async def delete_service(
    service_id: int,
    repo: ServiceRepository = Depends(get_service_repository),
):
    """
    Delete a service record.
    """
    deleted = await repo.delete(service_id)
    return {"message": "Service record deleted successfully", "deletedService": deleted}
