"""
Account ledger arithmetic shared by the API and the client store.

The balance is never stored independently of the running totals: every
change goes through apply_transaction, which recomputes it.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Tuple

from agency.models.transaction import TransactionType


@dataclass(frozen=True)
class LedgerTotals:
    total_debt: float = 0.0
    total_paid: float = 0.0

    @property
    def balance(self) -> float:
        return round(self.total_debt - self.total_paid, 2)


def check_amount(amount: float) -> float:
    """
    Return the amount rounded to cents.

    The rounded value is what gets stored on the transaction, so the totals
    always equal the sums of the stored amounts.

    Raises:
        ValueError: Not a finite number, or less than one cent once rounded
    """
    try:
        value = float(amount)
    except (TypeError, ValueError):
        raise ValueError("Amount must be a number")
    if not math.isfinite(value) or value <= 0:
        raise ValueError("Amount must be a positive number")
    value = round(value, 2)
    if value <= 0:
        raise ValueError("Amount must be at least 0.01")
    return value


def apply_transaction(totals: LedgerTotals, kind: TransactionType, amount: float) -> LedgerTotals:
    """
    Fold one transaction into the running totals.

    Debt raises the owed total, Payment raises the paid total.
    """
    amount = check_amount(amount)
    if TransactionType(kind) == TransactionType.DEBT:
        return LedgerTotals(round(totals.total_debt + amount, 2), totals.total_paid)
    return LedgerTotals(totals.total_debt, round(totals.total_paid + amount, 2))


def fold_transactions(entries: Iterable[Tuple[TransactionType, float]]) -> LedgerTotals:
    """Recompute totals from a full transaction history."""
    totals = LedgerTotals()
    for kind, amount in entries:
        totals = apply_transaction(totals, kind, amount)
    return totals
