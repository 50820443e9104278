"""
Customer routes.
"""
from fastapi import APIRouter, Depends, status

from garage.dependencies import get_customer_repository
from garage.repositories import CustomerRepository
from garage.schemas.customer import CustomerCreate, CustomerUpdate

router = APIRouter(prefix="/customers", tags=["customers"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_customer(
    customer: CustomerCreate,
    repo: CustomerRepository = Depends(get_customer_repository),
):
    """
    Create a new customer.
    """
    created = await repo.create(customer.name, customer.phone, customer.email, customer.address)
    return {"message": "Customer created successfully", "customer": created}


@router.get("")
async def get_customers(repo: CustomerRepository = Depends(get_customer_repository)):
    """
    Get all customers, newest first.
    """
    customers = await repo.list()
    return {
        "message": "Customers retrieved successfully",
        "customers": customers,
        "count": len(customers),
    }


@router.get("/search/{query}")
async def search_customers(
    query: str,
    repo: CustomerRepository = Depends(get_customer_repository),
):
    """
    Search customers by name, phone or email.
    """
    customers = await repo.search(query)
    return {
        "message": "Customer search completed successfully",
        "customers": customers,
        "count": len(customers),
        "searchQuery": query,
    }


@router.get("/stats/summary")
async def customer_stats(repo: CustomerRepository = Depends(get_customer_repository)):
    return {
        "message": "Customer statistics retrieved successfully",
        "stats": await repo.stats(),
    }


@router.get("/{customer_id}")
async def get_customer(
    customer_id: int,
    repo: CustomerRepository = Depends(get_customer_repository),
):
    """
    Get a specific customer by ID.
    """
    return {
        "message": "Customer retrieved successfully",
        "customer": await repo.get(customer_id),
    }


@router.put("/{customer_id}")
async def update_customer(
    customer_id: int,
    customer: CustomerUpdate,
    repo: CustomerRepository = Depends(get_customer_repository),
):
    """
    Replace a customer's name, phone, email and address.
    """
    updated = await repo.update(
        customer_id, customer.name, customer.phone, customer.email, customer.address
    )
    return {"message": "Customer updated successfully", "customer": updated}


@router.delete("/{customer_id}")
async def delete_customer(
    customer_id: int,
    repo: CustomerRepository = Depends(get_customer_repository),
):
    """
    Delete a customer that has no vehicles.
    """
    deleted = await repo.delete(customer_id)
    return {"message": "Customer deleted successfully", "deletedCustomer": deleted}
