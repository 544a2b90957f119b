from __future__ import annotations

import unittest
from decimal import Decimal
from unittest.mock import patch

from fastapi.testclient import TestClient

from domain.errors import LedgerStoreError
from infrastructure.ledger_store.memory_store import InMemoryLedgerStore
from interface.api import create_app


class LedgerApiTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryLedgerStore()
        self.client = TestClient(create_app(self.store))

    def _category(self, name: str, txn_type: str = "EXPENSE") -> dict:
        res = self.client.post("/owners/u_1/categories", json={"name": name, "type": txn_type})
        self.assertEqual(res.status_code, 201, res.text)
        return res.json()

    def _transaction(self, amount: str, txn_type: str, day: str, category_id: int | None = None) -> dict:
        payload = {"amount": amount, "type": txn_type, "date": day, "category_id": category_id}
        res = self.client.post("/owners/u_1/transactions", json=payload)
        self.assertEqual(res.status_code, 201, res.text)
        return res.json()

    def test_health(self) -> None:
        self.assertEqual(self.client.get("/health").json(), {"status": "ok"})

    def test_seed_defaults_twice(self) -> None:
        first = self.client.post("/owners/u_1/categories/defaults").json()
        second = self.client.post("/owners/u_1/categories/defaults").json()

        self.assertTrue(first["created"])
        self.assertFalse(second["created"])
        self.assertEqual(len(self.client.get("/owners/u_1/categories").json()), 14)
        self.assertEqual(len(self.client.get("/owners/u_1/categories", params={"type": "INCOME"}).json()), 4)

    def test_duplicate_category_conflicts(self) -> None:
        self._category("Food")

        res = self.client.post("/owners/u_1/categories", json={"name": "Food", "type": "EXPENSE"})

        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.json()["detail"], "A category with this name and type already exists")
        self._category("Food", "INCOME")

    def test_delete_category_in_use(self) -> None:
        food = self._category("Food")
        spare = self._category("Spare")
        self._transaction("12.00", "EXPENSE", "2024-01-03", food["id"])

        self.assertEqual(self.client.delete(f"/owners/u_1/categories/{food['id']}").status_code, 409)
        self.assertEqual(self.client.delete(f"/owners/u_1/categories/{spare['id']}").status_code, 200)
        self.assertEqual(self.client.get(f"/owners/u_1/categories/{spare['id']}").status_code, 404)

    def test_invalid_payloads(self) -> None:
        negative = self.client.post("/owners/u_1/transactions", json={"amount": "-1", "type": "EXPENSE", "date": "2024-01-01"})
        bad_type = self.client.post("/owners/u_1/transactions", json={"amount": "1", "type": "LOAN", "date": "2024-01-01"})
        foreign = self.client.post(
            "/owners/u_1/transactions", json={"amount": "1", "type": "EXPENSE", "date": "2024-01-01", "category_id": 77}
        )

        self.assertEqual(negative.status_code, 422)
        self.assertEqual(bad_type.status_code, 422)
        self.assertEqual(foreign.status_code, 400)
        self.assertEqual(foreign.json()["detail"], "Invalid category")

    def test_transaction_crud(self) -> None:
        created = self._transaction("10.00", "INCOME", "2024-01-05")
        tid = created["id"]

        res = self.client.put(
            f"/owners/u_1/transactions/{tid}",
            json={"amount": "12.34", "type": "INCOME", "date": "2024-01-06", "description": "bonus"},
        )
        self.assertEqual(res.status_code, 200, res.text)
        fetched = self.client.get(f"/owners/u_1/transactions/{tid}").json()
        self.assertEqual(fetched["amount"], "12.34")
        self.assertEqual(fetched["description"], "bonus")
        self.assertEqual(self.client.get(f"/owners/u_2/transactions/{tid}").status_code, 404)

        self.assertEqual(self.client.delete(f"/owners/u_1/transactions/{tid}").status_code, 200)
        self.assertEqual(self.client.delete(f"/owners/u_1/transactions/{tid}").status_code, 404)

    def test_list_and_recent(self) -> None:
        for day in ("2024-01-01", "2024-01-15", "2024-02-01"):
            self._transaction("1.00", "EXPENSE", day)

        january = self.client.get("/owners/u_1/transactions", params={"start": "2024-01-01", "end": "2024-01-31"})
        recent = self.client.get("/owners/u_1/transactions/recent", params={"limit": 2})
        half_range = self.client.get("/owners/u_1/transactions", params={"start": "2024-01-01"})

        self.assertEqual(len(january.json()), 2)
        self.assertEqual([t["date"] for t in recent.json()], ["2024-02-01", "2024-01-15"])
        self.assertEqual(half_range.status_code, 422)

    def test_recent_limit_must_be_positive(self) -> None:
        self._transaction("1.00", "EXPENSE", "2024-01-01")

        for limit in (0, -1):
            with self.subTest(limit=limit):
                res = self.client.get("/owners/u_1/transactions/recent", params={"limit": limit})
                self.assertEqual(res.status_code, 422)

    def test_amounts_serialized_as_decimal_strings(self) -> None:
        created = self._transaction("12.34", "EXPENSE", "2024-01-05")

        listed = self.client.get("/owners/u_1/transactions").json()
        recent = self.client.get("/owners/u_1/transactions/recent").json()

        self.assertEqual(created["amount"], "12.34")
        self.assertEqual(listed[0]["amount"], "12.34")
        self.assertEqual(recent[0]["amount"], "12.34")

    def test_report(self) -> None:
        salary = self._category("Salary", "INCOME")
        food = self._category("Food")
        self._category("Transport")
        self._transaction("100", "INCOME", "2024-01-05", salary["id"])
        self._transaction("40", "EXPENSE", "2024-01-10", food["id"])
        self._transaction("15", "EXPENSE", "2024-02-01", food["id"])

        res = self.client.get("/owners/u_1/report", params={"type": "EXPENSE", "start": "2024-01-01", "end": "2024-01-31"})

        self.assertEqual(res.status_code, 200, res.text)
        body = res.json()
        self.assertTrue(body["ok"])
        self.assertEqual(Decimal(str(body["summary"]["balance"])), Decimal("60"))
        self.assertEqual(body["summary"]["transaction_count"], 2)
        stats = body["category_statistics"][0]
        self.assertEqual(stats["type"], "EXPENSE")
        self.assertEqual([(c["name"], c["percentage"]) for c in stats["categories"]], [("Food", 100.0), ("Transport", 0.0)])

    def test_report_rejects_reversed_range(self) -> None:
        res = self.client.get("/owners/u_1/report", params={"start": "2024-02-01", "end": "2024-01-01"})

        self.assertEqual(res.status_code, 422)

    def test_report_store_failure_is_503(self) -> None:
        with patch.object(self.store, "find_transactions", side_effect=LedgerStoreError("database is down")):
            res = self.client.get("/owners/u_1/report")

        self.assertEqual(res.status_code, 503)
        body = res.json()
        self.assertFalse(body["ok"])
        self.assertIsNone(body["summary"])
        self.assertTrue(body["errors"])


if __name__ == "__main__":
    unittest.main()
