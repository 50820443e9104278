"""
Data access layer (Repository pattern).

Repositories own the integrity rules between customers, vehicles and
service records and compose the SQL for every read view. They return
plain dicts and raise ``garage.errors`` types; they know nothing about
HTTP.
"""
from garage.repositories.customers import CustomerRepository
from garage.repositories.vehicles import VehicleRepository
from garage.repositories.services import ServiceRepository

__all__ = ["CustomerRepository", "VehicleRepository", "ServiceRepository"]
