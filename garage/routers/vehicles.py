"""
Vehicle routes.
"""
from fastapi import APIRouter, Depends, status

from garage.dependencies import get_vehicle_repository
from garage.repositories import VehicleRepository
from garage.schemas.vehicle import VehicleCreate, VehicleUpdate

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_vehicle(
    vehicle: VehicleCreate,
    repo: VehicleRepository = Depends(get_vehicle_repository),
):
    """
    Register a vehicle for an existing customer.
    """
    created = await repo.create(
        vehicle.customer_id, vehicle.make, vehicle.model, vehicle.year, vehicle.license_plate
    )
    return {"message": "Vehicle created successfully", "vehicle": created}


@router.get("")
async def get_vehicles(repo: VehicleRepository = Depends(get_vehicle_repository)):
    """
    Get all vehicles with their owner's name and phone.
    """
    vehicles = await repo.list()
    return {
        "message": "Vehicles retrieved successfully",
        "vehicles": vehicles,
        "count": len(vehicles),
    }


@router.get("/customer/{customer_id}")
async def get_customer_vehicles(
    customer_id: int,
    repo: VehicleRepository = Depends(get_vehicle_repository),
):
    vehicles = await repo.list_by_customer(customer_id)
    return {
        "message": "Customer vehicles retrieved successfully",
        "vehicles": vehicles,
        "count": len(vehicles),
        "customer_id": customer_id,
    }


@router.get("/search/{query}")
async def search_vehicles(
    query: str,
    repo: VehicleRepository = Depends(get_vehicle_repository),
):
    """
    Search vehicles by make, model, license plate or owner name.
    """
    vehicles = await repo.search(query)
    return {
        "message": "Vehicle search completed successfully",
        "vehicles": vehicles,
        "count": len(vehicles),
        "searchQuery": query,
    }


@router.get("/stats/summary")
async def vehicle_stats(repo: VehicleRepository = Depends(get_vehicle_repository)):
    return {
        "message": "Vehicle statistics retrieved successfully",
        "stats": await repo.stats(),
    }


@router.get("/{vehicle_id}")
async def get_vehicle(
    vehicle_id: int,
    repo: VehicleRepository = Depends(get_vehicle_repository),
):
    """
    Get a specific vehicle by ID.
    """
    return {
        "message": "Vehicle retrieved successfully",
        "vehicle": await repo.get(vehicle_id),
    }


@router.put("/{vehicle_id}")
async def update_vehicle(
    vehicle_id: int,
    vehicle: VehicleUpdate,
    repo: VehicleRepository = Depends(get_vehicle_repository),
):
    """
    Update a vehicle.
    """
    updated = await repo.update(
        vehicle_id,
        vehicle.customer_id,
        vehicle.make,
        vehicle.model,
        vehicle.year,
        vehicle.license_plate,
    )
    return {"message": "Vehicle updated successfully", "vehicle": updated}


@router.delete("/{vehicle_id}")
async def delete_vehicle(
    vehicle_id: int,
    repo: VehicleRepository = Depends(get_vehicle_repository),
):
    """
    Delete a vehicle that has no service records.
    """
    deleted = await repo.delete(vehicle_id)
    return {"message": "Vehicle deleted successfully", "deletedVehicle": deleted}
