"""
Shared fixtures: every test case gets its own SQLite file.
"""
import os
import tempfile
import unittest

from fastapi.testclient import TestClient

from garage.config import Settings
from garage.database import Database
from garage.main import create_app
from garage.repositories import CustomerRepository, ServiceRepository, VehicleRepository


def temp_database_url(directory: str) -> str:
    return f"sqlite+aiosqlite:///{os.path.join(directory, 'garage-test.db')}"


class RepositoryTestCase(unittest.IsolatedAsyncioTestCase):
    """Connected gateway plus the three repositories."""

    async def asyncSetUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.db = Database(temp_database_url(self._tmp.name))
        await self.db.connect()
        self.customers = CustomerRepository(self.db)
        self.vehicles = VehicleRepository(self.db)
        self.services = ServiceRepository(self.db)

    async def asyncTearDown(self):
        await self.db.disconnect()
        self._tmp.cleanup()

    async def make_customer(self, name="John Doe", phone="555-0100", **optional):
        return await self.customers.create(name, phone, **optional)

    async def make_vehicle(self, customer_id, license_plate="ABC-123", make="Honda",
                           model="Civic", year=2022):
        return await self.vehicles.create(customer_id, make, model, year, license_plate)

    async def make_service(self, vehicle_id, service_date="2025-06-20",
                           description="Oil change", cost=85.50, status=None):
        return await self.services.create(vehicle_id, service_date, description, cost, status)


class ApiTestCase(unittest.TestCase):
    """A running app (lifespan entered) on a throw-away database."""

    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.settings = Settings(database_url=temp_database_url(tmp.name))
        self.client = TestClient(create_app(self.settings))
        self.client.__enter__()
        self.addCleanup(self.client.__exit__, None, None, None)

    def post_customer(self, **data):
        payload = {"name": "Alice Johnson", "phone": "555-0123"}
        payload.update(data)
        response = self.client.post("/api/customers", json=payload)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["customer"]

    def post_vehicle(self, customer_id, **data):
        payload = {
            "customer_id": customer_id,
            "make": "Toyota",
            "model": "Camry",
            "year": 2020,
            "license_plate": "INT-123",
        }
        payload.update(data)
        response = self.client.post("/api/vehicles", json=payload)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["vehicle"]

    def post_service(self, vehicle_id, **data):
        payload = {
            "vehicle_id": vehicle_id,
            "service_date": "2025-06-20",
            "description": "Oil change",
            "cost": 85.50,
        }
        payload.update(data)
        response = self.client.post("/api/services", json=payload)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["service"]
