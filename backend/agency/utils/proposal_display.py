"""
Utility for computing the totals shown on a printed proposal.
"""

from dataclasses import dataclass
from typing import Iterable

from agency.schemas.proposal import ProposalItem, ProposalResponse

CURRENCY_SYMBOLS = {
    "TRY": "₺",
    "USD": "$",
    "EUR": "€",
}


@dataclass(frozen=True)
class ProposalTotals:
    """Subtotal, tax and grand total of a proposal."""
    subtotal: float
    tax_rate: float
    tax: float
    grand_total: float
    currency_symbol: str


def sum_line_items(items: Iterable[ProposalItem]) -> float:
    """Sum of line totals (entered totals or quantity * unit price)."""
    return round(sum(item.total for item in items), 2)


def compute_proposal_totals(proposal: ProposalResponse) -> ProposalTotals:
    """
    Compute the figures printed at the bottom of a proposal.

    Tax is added on top of the subtotal only when the proposal shows it.
    """
    subtotal = sum_line_items(proposal.items) if proposal.items else proposal.total_amount
    tax = round(subtotal * proposal.tax_rate / 100, 2) if proposal.show_tax else 0.0
    symbol = proposal.currency_symbol or CURRENCY_SYMBOLS.get(proposal.currency.value, "")
    return ProposalTotals(
        subtotal=subtotal,
        tax_rate=proposal.tax_rate if proposal.show_tax else 0.0,
        tax=tax,
        grand_total=round(subtotal + tax, 2),
        currency_symbol=symbol,
    )


def format_amount(amount: float, symbol: str = "") -> str:
    """Format an amount with thousands separators, e.g. ₺45,000.00."""
    return f"{symbol}{amount:,.2f}"
