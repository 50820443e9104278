"""
FastAPI dependencies wiring repositories to the application's gateway.
"""
from fastapi import Depends

from garage.database import Database, get_db
from garage.repositories import CustomerRepository, ServiceRepository, VehicleRepository


def get_customer_repository(db: Database = Depends(get_db)) -> CustomerRepository:
    return CustomerRepository(db)


def get_vehicle_repository(db: Database = Depends(get_db)) -> VehicleRepository:
    return VehicleRepository(db)


def get_service_repository(db: Database = Depends(get_db)) -> ServiceRepository:
    return ServiceRepository(db)
