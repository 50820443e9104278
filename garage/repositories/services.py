"""
Service record repository.

A service record belongs to an existing vehicle. Nothing references a
service record, so deletes are unconditional. Read views join through
the vehicle to its owning customer.
"""
import logging
import math
from datetime import date
from typing import Any, List, Optional

from garage.errors import NotFound, ValidationError
from garage.models.service import DEFAULT_STATUS
from garage.repositories.base import BaseRepository, is_blank, like_pattern, to_int
from garage.repositories.vehicles import VEHICLE_NOT_FOUND

logger = logging.getLogger(__name__)

SERVICE_NOT_FOUND = "Service record not found"
REQUIRED_FIELDS = "Required fields: vehicle_id, service_date, description, cost"
INVALID_COST = "Cost must be a valid positive number"
INVALID_DATE = "Service date must be a valid date (YYYY-MM-DD)"

SELECT_BY_ID = "SELECT * FROM services WHERE id = :id"

WITH_VEHICLE = """
    SELECT s.*,
           v.make, v.model, v.year, v.license_plate,
           c.name AS customer_name, c.phone AS customer_phone
    FROM services s
    JOIN vehicles v ON s.vehicle_id = v.id
    JOIN customers c ON v.customer_id = c.id
"""

NEWEST_FIRST = " ORDER BY s.service_date DESC, s.id DESC"


def parse_cost(cost: Any) -> float:
    """Numeric, finite and not negative; strings such as ``"85.50"`` are accepted."""
    if isinstance(cost, bool):
        raise ValidationError(INVALID_COST)
    try:
        value = float(cost)
    except (TypeError, ValueError):
        raise ValidationError(INVALID_COST) from None
    if not math.isfinite(value) or value < 0:
        raise ValidationError(INVALID_COST)
    return value


def parse_service_date(service_date: Any) -> str:
    if isinstance(service_date, date):
        return service_date.isoformat()
    try:
        return date.fromisoformat(str(service_date).strip()).isoformat()
    except ValueError:
        raise ValidationError(INVALID_DATE) from None


class ServiceRepository(BaseRepository):
    """CRUD, history views, search and revenue statistics for service records."""

    @staticmethod
    def _clean(vehicle_id, service_date, description, cost, status) -> dict:
        if any(is_blank(value) for value in (vehicle_id, service_date, description, cost)):
            raise ValidationError(REQUIRED_FIELDS)
        return {
            "vehicle_id": to_int(vehicle_id, "Vehicle id must be an integer"),
            "service_date": parse_service_date(service_date),
            "description": description,
            "cost": parse_cost(cost),
            "status": DEFAULT_STATUS if is_blank(status) else status,
        }

    async def create(
        self,
        vehicle_id: Optional[int],
        service_date: Optional[str],
        description: Optional[str],
        cost: Any,
        status: Optional[str] = None,
    ) -> dict:
        values = self._clean(vehicle_id, service_date, description, cost, status)
        async with self.db.transaction() as tx:
            found = await tx.fetch_one(
                "SELECT id FROM vehicles WHERE id = :id", {"id": values["vehicle_id"]}
            )
            if found is None:
                raise NotFound(VEHICLE_NOT_FOUND)
            result = await tx.execute(
                """
                INSERT INTO services (vehicle_id, service_date, description, cost, status)
                VALUES (:vehicle_id, :service_date, :description, :cost, :status)
                """,
                values,
            )
            service = await tx.fetch_one(SELECT_BY_ID, {"id": result.new_id})
        logger.info("Created service record %s for vehicle %s", result.new_id, values["vehicle_id"])
        return service

    async def get(self, service_id: int) -> dict:
        """Service record with vehicle details and the owner's contact info."""
        service = await self.db.fetch_one(
            """
            SELECT s.*,
                   v.make, v.model, v.year, v.license_plate,
                   c.name AS customer_name, c.phone AS customer_phone,
                   c.email AS customer_email
            FROM services s
            JOIN vehicles v ON s.vehicle_id = v.id
            JOIN customers c ON v.customer_id = c.id
            WHERE s.id = :id
            """,
            {"id": service_id},
        )
        if service is None:
            raise NotFound(SERVICE_NOT_FOUND)
        return service

    async def list(self) -> List[dict]:
        return await self.db.fetch_many(WITH_VEHICLE + NEWEST_FIRST)

    async def list_by_vehicle(self, vehicle_id: int) -> List[dict]:
        return await self.db.fetch_many(
            WITH_VEHICLE + " WHERE s.vehicle_id = :vehicle_id" + NEWEST_FIRST,
            {"vehicle_id": vehicle_id},
        )

    async def list_by_customer(self, customer_id: int) -> List[dict]:
        return await self.db.fetch_many(
            WITH_VEHICLE + " WHERE v.customer_id = :customer_id" + NEWEST_FIRST,
            {"customer_id": customer_id},
        )

    async def search(self, query: str) -> List[dict]:
        return await self.db.fetch_many(
            WITH_VEHICLE
            + """
            WHERE LOWER(s.description) LIKE :pattern ESCAPE '!'
               OR LOWER(COALESCE(s.status, '')) LIKE :pattern ESCAPE '!'
               OR LOWER(v.make) LIKE :pattern ESCAPE '!'
               OR LOWER(v.model) LIKE :pattern ESCAPE '!'
               OR LOWER(v.license_plate) LIKE :pattern ESCAPE '!'
               OR LOWER(c.name) LIKE :pattern ESCAPE '!'
            """
            + NEWEST_FIRST,
            {"pattern": like_pattern(query)},
        )

    async def update(
        self,
        service_id: int,
        vehicle_id: Optional[int],
        service_date: Optional[str],
        description: Optional[str],
        cost: Any,
        status: Optional[str] = None,
    ) -> dict:
        async with self.db.transaction() as tx:
            if await tx.fetch_one(SELECT_BY_ID, {"id": service_id}) is None:
                raise NotFound(SERVICE_NOT_FOUND)
            values = self._clean(vehicle_id, service_date, description, cost, status)
            found = await tx.fetch_one(
                "SELECT id FROM vehicles WHERE id = :id", {"id": values["vehicle_id"]}
            )
            if found is None:
                raise NotFound(VEHICLE_NOT_FOUND)
            await tx.execute(
                """
                UPDATE services
                SET vehicle_id = :vehicle_id, service_date = :service_date,
                    description = :description, cost = :cost, status = :status
                WHERE id = :id
                """,
                {**values, "id": service_id},
            )
            service = await tx.fetch_one(SELECT_BY_ID, {"id": service_id})
        logger.info("Updated service record %s", service_id)
        return service

    async def delete(self, service_id: int) -> dict:
        async with self.db.transaction() as tx:
            service = await tx.fetch_one(SELECT_BY_ID, {"id": service_id})
            if service is None:
                raise NotFound(SERVICE_NOT_FOUND)
            await tx.execute("DELETE FROM services WHERE id = :id", {"id": service_id})
        logger.info("Deleted service record %s", service_id)
        return service

    async def stats(self) -> dict:
        totals = await self.db.fetch_one(
            "SELECT COUNT(*) AS count, COALESCE(SUM(cost), 0) AS revenue FROM services"
        )
        by_status = await self.db.fetch_many(
            """
            SELECT status, COUNT(*) AS count
            FROM services
            GROUP BY status
            ORDER BY count DESC, status
            """
        )
        return {
            "totalServices": totals["count"],
            "totalRevenue": round(float(totals["revenue"]), 2),
            "servicesByStatus": by_status,
        }
