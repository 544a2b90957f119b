from __future__ import annotations

import unittest
from datetime import date
from decimal import Decimal

from aggregation.summary import compute_summary
from domain.errors import LedgerContractError
from domain.models import Transaction, TransactionType
from domain.schemas import Summary

INCOME = TransactionType.INCOME
EXPENSE = TransactionType.EXPENSE


def _txn(id: int, amount: str, txn_type: TransactionType, day: date = date(2024, 1, 5)) -> Transaction:
    return Transaction(id=id, owner_id="u_1", amount=Decimal(amount), date=day, type=txn_type)


class ComputeSummaryTests(unittest.TestCase):
    def test_empty_set_is_all_zero(self) -> None:
        summary = compute_summary([])

        self.assertEqual(summary, Summary())
        self.assertEqual(summary.total_income, Decimal("0"))
        self.assertEqual(summary.transaction_count, 0)

    def test_partitions_by_type(self) -> None:
        summary = compute_summary([
            _txn(1, "100", INCOME),
            _txn(2, "40", EXPENSE, date(2024, 1, 10)),
        ])

        self.assertEqual(summary.total_income, Decimal("100"))
        self.assertEqual(summary.total_expense, Decimal("40"))
        self.assertEqual(summary.balance, Decimal("60"))
        self.assertEqual(summary.income_count, 1)
        self.assertEqual(summary.expense_count, 1)
        self.assertEqual(summary.transaction_count, 2)

    def test_balance_and_counts_hold_for_varied_sets(self) -> None:
        sets = [
            [_txn(1, "5.25", EXPENSE)],
            [_txn(1, "12.00", INCOME), _txn(2, "12.00", INCOME)],
            [_txn(i, f"{i}.{i:02d}", INCOME if i % 3 else EXPENSE) for i in range(1, 30)],
        ]
        for txns in sets:
            with self.subTest(size=len(txns)):
                summary = compute_summary(txns)
                self.assertEqual(summary.balance, summary.total_income - summary.total_expense)
                self.assertEqual(summary.transaction_count, summary.income_count + summary.expense_count)
                self.assertEqual(summary.transaction_count, len(txns))

    def test_cent_totals_are_exact(self) -> None:
        txns = [_txn(i, "0.10", EXPENSE) for i in range(1, 4)]

        summary = compute_summary(txns)

        self.assertEqual(summary.total_expense, Decimal("0.30"))
        self.assertEqual(summary.balance, Decimal("-0.30"))

    def test_result_does_not_depend_on_order(self) -> None:
        txns = [_txn(1, "19.99", INCOME), _txn(2, "0.01", EXPENSE), _txn(3, "7.50", EXPENSE)]

        self.assertEqual(compute_summary(txns), compute_summary(list(reversed(txns))))

    def test_balance_can_go_negative(self) -> None:
        summary = compute_summary([_txn(1, "10", INCOME), _txn(2, "25", EXPENSE)])

        self.assertEqual(summary.balance, Decimal("-15"))

    def test_malformed_type_tag_fails_fast(self) -> None:
        bad = Transaction(id=9, owner_id="u_1", amount=Decimal("1"), date=date(2024, 1, 1), type="TRANSFER")

        with self.assertRaises(LedgerContractError):
            compute_summary([_txn(1, "10", INCOME), bad])

    def test_non_positive_amount_fails_fast(self) -> None:
        for amount in ("-5", "0"):
            with self.subTest(amount=amount):
                with self.assertRaises(LedgerContractError):
                    compute_summary([_txn(1, amount, EXPENSE)])

    def test_float_amount_is_a_contract_violation(self) -> None:
        bad = Transaction(id=1, owner_id="u_1", amount=0.1, date=date(2024, 1, 1), type=EXPENSE)

        with self.assertRaises(LedgerContractError):
            compute_summary([bad])

    def test_contract_error_is_a_value_error(self) -> None:
        self.assertTrue(issubclass(LedgerContractError, ValueError))


if __name__ == "__main__":
    unittest.main()
