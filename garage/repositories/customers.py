"""
Customer repository.

A customer owns zero or more vehicles. Deleting a customer is refused
while any vehicle still references it; the count check and the delete
run in one transaction.
"""
import logging
from typing import List, Optional

from garage.errors import Conflict, NotFound, ValidationError
from garage.repositories.base import BaseRepository, is_blank, like_pattern

logger = logging.getLogger(__name__)

CUSTOMER_NOT_FOUND = "Customer not found"
NAME_AND_PHONE_REQUIRED = "Name and phone are required"
HAS_VEHICLES = "Cannot delete customer with associated vehicles"

SELECT_BY_ID = "SELECT * FROM customers WHERE id = :id"


class CustomerRepository(BaseRepository):
    """CRUD, search and statistics for customers."""

    @staticmethod
    def _validate(name: Optional[str], phone: Optional[str]) -> None:
        if is_blank(name) or is_blank(phone):
            raise ValidationError(NAME_AND_PHONE_REQUIRED)

    async def create(
        self,
        name: Optional[str],
        phone: Optional[str],
        email: Optional[str] = None,
        address: Optional[str] = None,
    ) -> dict:
        self._validate(name, phone)
        async with self.db.transaction() as tx:
            result = await tx.execute(
                """
                INSERT INTO customers (name, phone, email, address)
                VALUES (:name, :phone, :email, :address)
                """,
                {"name": name, "phone": phone, "email": email, "address": address},
            )
            customer = await tx.fetch_one(SELECT_BY_ID, {"id": result.new_id})
        logger.info("Created customer %s", result.new_id)
        return customer

    async def get(self, customer_id: int) -> dict:
        customer = await self.db.fetch_one(SELECT_BY_ID, {"id": customer_id})
        if customer is None:
            raise NotFound(CUSTOMER_NOT_FOUND)
        return customer

    async def list(self) -> List[dict]:
        return await self.db.fetch_many(
            "SELECT * FROM customers ORDER BY created_date DESC, id DESC"
        )

    async def update(
        self,
        customer_id: int,
        name: Optional[str],
        phone: Optional[str],
        email: Optional[str] = None,
        address: Optional[str] = None,
    ) -> dict:
        async with self.db.transaction() as tx:
            if await tx.fetch_one(SELECT_BY_ID, {"id": customer_id}) is None:
                raise NotFound(CUSTOMER_NOT_FOUND)
            self._validate(name, phone)
            await tx.execute(
                """
                UPDATE customers
                SET name = :name, phone = :phone, email = :email, address = :address
                WHERE id = :id
                """,
                {
                    "id": customer_id,
                    "name": name,
                    "phone": phone,
                    "email": email,
                    "address": address,
                },
            )
            customer = await tx.fetch_one(SELECT_BY_ID, {"id": customer_id})
        logger.info("Updated customer %s", customer_id)
        return customer

    async def delete(self, customer_id: int) -> dict:
        """Remove a customer with no vehicles and return the removed row."""
        async with self.db.transaction() as tx:
            customer = await tx.fetch_one(SELECT_BY_ID, {"id": customer_id})
            if customer is None:
                raise NotFound(CUSTOMER_NOT_FOUND)
            row = await tx.fetch_one(
                "SELECT COUNT(*) AS count FROM vehicles WHERE customer_id = :id",
                {"id": customer_id},
            )
            if row["count"] > 0:
                logger.warning(
                    "Refusing to delete customer %s: %s vehicle(s) attached",
                    customer_id, row["count"],
                )
                raise Conflict(HAS_VEHICLES, vehicleCount=row["count"])
            await tx.execute("DELETE FROM customers WHERE id = :id", {"id": customer_id})
        logger.info("Deleted customer %s", customer_id)
        return customer

    async def search(self, query: str) -> List[dict]:
        """Case-insensitive substring match on name, phone and email."""
        return await self.db.fetch_many(
            """
            SELECT * FROM customers
            WHERE LOWER(name) LIKE :pattern ESCAPE '!'
               OR LOWER(phone) LIKE :pattern ESCAPE '!'
               OR LOWER(COALESCE(email, '')) LIKE :pattern ESCAPE '!'
            ORDER BY name, id
            """,
            {"pattern": like_pattern(query)},
        )

    async def stats(self) -> dict:
        row = await self.db.fetch_one(
            """
            SELECT
                (SELECT COUNT(*) FROM customers) AS total,
                (SELECT COUNT(*) FROM customers c
                  WHERE EXISTS (SELECT 1 FROM vehicles v WHERE v.customer_id = c.id)
                ) AS with_vehicles
            """
        )
        total = row["total"] or 0
        with_vehicles = row["with_vehicles"] or 0
        return {
            "totalCustomers": total,
            "customersWithVehicles": with_vehicles,
            "customersWithoutVehicles": total - with_vehicles,
        }
