"""
Pydantic schemas for request bodies.
"""
from garage.schemas.customer import CustomerBase, CustomerCreate, CustomerUpdate
from garage.schemas.vehicle import VehicleBase, VehicleCreate, VehicleUpdate
from garage.schemas.service import ServiceBase, ServiceCreate, ServiceUpdate

__all__ = [
    "CustomerBase", "CustomerCreate", "CustomerUpdate",
    "VehicleBase", "VehicleCreate", "VehicleUpdate",
    "ServiceBase", "ServiceCreate", "ServiceUpdate",
]
