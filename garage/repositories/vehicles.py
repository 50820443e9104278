"""
Vehicle repository.

Every vehicle belongs to an existing customer and carries a license
plate no other vehicle has. The plate check runs before the write, and
the unique index on ``vehicles.license_plate`` catches whatever slips
past it (surfaced by the gateway as ``Conflict``).
"""
import logging
import math
from typing import Any, List, Optional

from garage.database import Transaction
from garage.errors import Conflict, NotFound, ValidationError
from garage.repositories.base import BaseRepository, is_blank, like_pattern, to_int
from garage.repositories.customers import CUSTOMER_NOT_FOUND

logger = logging.getLogger(__name__)

VEHICLE_NOT_FOUND = "Vehicle not found"
ALL_FIELDS_REQUIRED = "All fields are required: customer_id, make, model, year, license_plate"
PLATE_TAKEN = "Vehicle with this license plate already exists"
HAS_SERVICES = "Cannot delete vehicle with associated service records"

SELECT_BY_ID = "SELECT * FROM vehicles WHERE id = :id"

WITH_CUSTOMER = """
    SELECT v.*, c.name AS customer_name, c.phone AS customer_phone
    FROM vehicles v
    JOIN customers c ON v.customer_id = c.id
"""


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class VehicleRepository(BaseRepository):
    """CRUD, search and statistics for vehicles."""

    @staticmethod
    def _clean(customer_id: Any, make: Any, model: Any, year: Any, license_plate: Any) -> dict:
        if any(is_blank(value) for value in (customer_id, make, model, year, license_plate)):
            raise ValidationError(ALL_FIELDS_REQUIRED)
        return {
            "customer_id": to_int(customer_id, "Customer id must be an integer"),
            "make": make,
            "model": model,
            "year": to_int(year, "Year must be a valid integer"),
            "license_plate": license_plate,
        }

    @staticmethod
    async def _require_customer(tx: Transaction, customer_id: int) -> None:
        found = await tx.fetch_one("SELECT id FROM customers WHERE id = :id", {"id": customer_id})
        if found is None:
            raise NotFound(CUSTOMER_NOT_FOUND)

    @staticmethod
    async def _require_free_plate(
        tx: Transaction, license_plate: str, vehicle_id: Optional[int] = None
    ) -> None:
        """Reject a plate already used by a vehicle other than ``vehicle_id``."""
        taken = await tx.fetch_one(
            "SELECT id FROM vehicles WHERE license_plate = :plate AND id != :id",
            {"plate": license_plate, "id": vehicle_id if vehicle_id is not None else -1},
        )
        if taken is not None:
            logger.warning("License plate %s already used by vehicle %s", license_plate, taken["id"])
            raise Conflict(PLATE_TAKEN)

    async def create(
        self,
        customer_id: Optional[int],
        make: Optional[str],
        model: Optional[str],
        year: Optional[int],
        license_plate: Optional[str],
    ) -> dict:
        values = self._clean(customer_id, make, model, year, license_plate)
        async with self.db.transaction() as tx:
            await self._require_customer(tx, values["customer_id"])
            await self._require_free_plate(tx, values["license_plate"])
            result = await tx.execute(
                """
                INSERT INTO vehicles (customer_id, make, model, year, license_plate)
                VALUES (:customer_id, :make, :model, :year, :license_plate)
                """,
                values,
            )
            vehicle = await tx.fetch_one(SELECT_BY_ID, {"id": result.new_id})
        logger.info("Created vehicle %s for customer %s", result.new_id, values["customer_id"])
        return vehicle

    async def get(self, vehicle_id: int) -> dict:
        """Vehicle joined with its owner's name, phone and email."""
        vehicle = await self.db.fetch_one(
            """
            SELECT v.*, c.name AS customer_name, c.phone AS customer_phone,
                   c.email AS customer_email
            FROM vehicles v
            JOIN customers c ON v.customer_id = c.id
            WHERE v.id = :id
            """,
            {"id": vehicle_id},
        )
        if vehicle is None:
            raise NotFound(VEHICLE_NOT_FOUND)
        return vehicle

    async def list(self) -> List[dict]:
        return await self.db.fetch_many(
            WITH_CUSTOMER + " ORDER BY v.created_date DESC, v.id DESC"
        )

    async def list_by_customer(self, customer_id: int) -> List[dict]:
        return await self.db.fetch_many(
            """
            SELECT * FROM vehicles
            WHERE customer_id = :customer_id
            ORDER BY created_date DESC, id DESC
            """,
            {"customer_id": customer_id},
        )

    async def search(self, query: str) -> List[dict]:
        """Match make, model, license plate or owner name, ignoring case."""
        return await self.db.fetch_many(
            WITH_CUSTOMER
            + """
            WHERE LOWER(v.make) LIKE :pattern ESCAPE '!'
               OR LOWER(v.model) LIKE :pattern ESCAPE '!'
               OR LOWER(v.license_plate) LIKE :pattern ESCAPE '!'
               OR LOWER(c.name) LIKE :pattern ESCAPE '!'
            ORDER BY v.make, v.model, v.id
            """,
            {"pattern": like_pattern(query)},
        )

    async def update(
        self,
        vehicle_id: int,
        customer_id: Optional[int],
        make: Optional[str],
        model: Optional[str],
        year: Optional[int],
        license_plate: Optional[str],
    ) -> dict:
        async with self.db.transaction() as tx:
            if await tx.fetch_one(SELECT_BY_ID, {"id": vehicle_id}) is None:
                raise NotFound(VEHICLE_NOT_FOUND)
            values = self._clean(customer_id, make, model, year, license_plate)
            await self._require_customer(tx, values["customer_id"])
            await self._require_free_plate(tx, values["license_plate"], vehicle_id)
            await tx.execute(
                """
                UPDATE vehicles
                SET customer_id = :customer_id, make = :make, model = :model,
                    year = :year, license_plate = :license_plate
                WHERE id = :id
                """,
                {**values, "id": vehicle_id},
            )
            vehicle = await tx.fetch_one(SELECT_BY_ID, {"id": vehicle_id})
        logger.info("Updated vehicle %s", vehicle_id)
        return vehicle

    async def delete(self, vehicle_id: int) -> dict:
        """Remove a vehicle with no service records and return the removed row."""
        async with self.db.transaction() as tx:
            vehicle = await tx.fetch_one(SELECT_BY_ID, {"id": vehicle_id})
            if vehicle is None:
                raise NotFound(VEHICLE_NOT_FOUND)
            row = await tx.fetch_one(
                "SELECT COUNT(*) AS count FROM services WHERE vehicle_id = :id",
                {"id": vehicle_id},
            )
            if row["count"] > 0:
                logger.warning(
                    "Refusing to delete vehicle %s: %s service record(s) attached",
                    vehicle_id, row["count"],
                )
                raise Conflict(HAS_SERVICES, serviceCount=row["count"])
            await tx.execute("DELETE FROM vehicles WHERE id = :id", {"id": vehicle_id})
        logger.info("Deleted vehicle %s", vehicle_id)
        return vehicle

    async def stats(self) -> dict:
        total = await self.db.fetch_one("SELECT COUNT(*) AS count FROM vehicles")
        by_make = await self.db.fetch_many(
            """
            SELECT make, COUNT(*) AS count
            FROM vehicles
            GROUP BY make
            ORDER BY count DESC, make
            """
        )
        average = await self.db.fetch_one("SELECT AVG(year) AS avg_year FROM vehicles")
        avg_year = average["avg_year"]
        return {
            "totalVehicles": total["count"],
            "vehiclesByMake": by_make,
            "averageYear": _round_half_up(avg_year) if avg_year is not None else 0,
        }
