"""
SQLAlchemy table definitions.
"""
from garage.models.customer import Customer
from garage.models.vehicle import Vehicle
from garage.models.service import Service

__all__ = ["Customer", "Vehicle", "Service"]
