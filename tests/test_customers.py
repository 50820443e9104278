import unittest

from garage.errors import Conflict, NotFound, ValidationError
from tests import support


class TestCustomerRepository(support.RepositoryTestCase):

    async def test_create_assigns_id_and_timestamp(self):
        """Created customer is readable by id with unset optionals as None"""
        customer = await self.make_customer()
        self.assertIsInstance(customer["id"], int)
        self.assertIsNotNone(customer["created_date"])
        self.assertIsNone(customer["email"])
        self.assertIsNone(customer["address"])

        fetched = await self.customers.get(customer["id"])
        self.assertEqual(fetched, customer)

    async def test_create_keeps_optional_fields(self):
        customer = await self.make_customer(email="john@example.com", address="1 Main St")
        fetched = await self.customers.get(customer["id"])
        self.assertEqual(fetched["email"], "john@example.com")
        self.assertEqual(fetched["address"], "1 Main St")

    async def test_create_requires_name_and_phone(self):
        for name, phone in [(None, "555"), ("John", None), ("", "555"), ("John", "   ")]:
            with self.subTest(name=name, phone=phone):
                with self.assertRaises(ValidationError) as ctx:
                    await self.customers.create(name, phone)
                self.assertEqual(ctx.exception.message, "Name and phone are required")
        self.assertEqual(await self.customers.list(), [])

    async def test_get_missing(self):
        with self.assertRaises(NotFound) as ctx:
            await self.customers.get(99999)
        self.assertEqual(ctx.exception.message, "Customer not found")

    async def test_list_newest_first(self):
        first = await self.make_customer(name="First")
        second = await self.make_customer(name="Second")
        customers = await self.customers.list()
        self.assertEqual([c["id"] for c in customers], [second["id"], first["id"]])

    async def test_update_replaces_all_mutable_fields(self):
        customer = await self.make_customer(email="old@example.com", address="Old St")
        updated = await self.customers.update(customer["id"], "Jane Roe", "555-9999")
        self.assertEqual(updated["name"], "Jane Roe")
        self.assertEqual(updated["phone"], "555-9999")
        self.assertIsNone(updated["email"])
        self.assertIsNone(updated["address"])
        self.assertEqual(updated["created_date"], customer["created_date"])

    async def test_update_missing_customer_wins_over_validation(self):
        with self.assertRaises(NotFound):
            await self.customers.update(99999, "", "")

    async def test_update_requires_name_and_phone(self):
        customer = await self.make_customer()
        with self.assertRaises(ValidationError):
            await self.customers.update(customer["id"], "John", "")
        self.assertEqual((await self.customers.get(customer["id"]))["phone"], "555-0100")

    async def test_delete_blocked_by_vehicles(self):
        customer = await self.make_customer()
        first = await self.make_vehicle(customer["id"], license_plate="AAA-1")
        second = await self.make_vehicle(customer["id"], license_plate="AAA-2")

        with self.assertRaises(Conflict) as ctx:
            await self.customers.delete(customer["id"])
        self.assertEqual(ctx.exception.extra, {"vehicleCount": 2})
        self.assertEqual(
            ctx.exception.to_dict(),
            {"error": "Cannot delete customer with associated vehicles", "vehicleCount": 2},
        )

        await self.vehicles.delete(first["id"])
        with self.assertRaises(Conflict) as ctx:
            await self.customers.delete(customer["id"])
        self.assertEqual(ctx.exception.extra["vehicleCount"], 1)

        await self.vehicles.delete(second["id"])
        deleted = await self.customers.delete(customer["id"])
        self.assertEqual(deleted, customer)
        with self.assertRaises(NotFound):
            await self.customers.get(customer["id"])

    async def test_delete_missing(self):
        with self.assertRaises(NotFound):
            await self.customers.delete(99999)

    async def test_search_is_case_insensitive_substring(self):
        john = await self.make_customer(name="John Doe", phone="555-0100", email="JD@Example.com")
        await self.make_customer(name="Mary Major", phone="555-0200")

        self.assertEqual([c["id"] for c in await self.customers.search("john")], [john["id"]])
        self.assertEqual([c["id"] for c in await self.customers.search("0100")], [john["id"]])
        self.assertEqual([c["id"] for c in await self.customers.search("jd@ex")], [john["id"]])
        self.assertEqual(len(await self.customers.search("555")), 2)
        self.assertEqual(await self.customers.search("zz-no-such-customer-zz"), [])

    async def test_search_treats_wildcards_literally(self):
        await self.make_customer(name="John Doe")
        self.assertEqual(await self.customers.search("%"), [])
        self.assertEqual(await self.customers.search("_"), [])
        percent = await self.make_customer(name="100% Motors")
        self.assertEqual([c["id"] for c in await self.customers.search("0%")], [percent["id"]])

    async def test_search_folds_non_ascii_case(self):
        omer = await self.make_customer(name="Ömer Çelik", phone="555-0300")
        await self.make_customer(name="John Doe")
        for query in ["Ömer", "ömer", "ÖMER ÇEL", "çelik"]:
            with self.subTest(query=query):
                self.assertEqual([c["id"] for c in await self.customers.search(query)], [omer["id"]])

    async def test_stats(self):
        self.assertEqual(
            await self.customers.stats(),
            {"totalCustomers": 0, "customersWithVehicles": 0, "customersWithoutVehicles": 0},
        )
        owner = await self.make_customer(name="Owner")
        await self.make_customer(name="Walker")
        await self.make_vehicle(owner["id"], license_plate="OWN-1")
        await self.make_vehicle(owner["id"], license_plate="OWN-2")
        self.assertEqual(
            await self.customers.stats(),
            {"totalCustomers": 2, "customersWithVehicles": 1, "customersWithoutVehicles": 1},
        )


if __name__ == "__main__":
    unittest.main()
