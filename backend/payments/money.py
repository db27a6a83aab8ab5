"""
Monetary helpers for settlement.

Money is always Decimal, never float. Amounts are quantized to the
currency's minor unit with ROUND_HALF_UP, which is how tills and printed
receipts round.

Change is decomposed greedily over DENOMINATIONS. Greedy is minimal only
because the euro note/coin series is a canonical coin system; a different
denomination set must be re-verified before reusing change_breakdown().
"""

from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Dict, List, Optional, Union

Number = Union[Decimal, str, int, float]

# Currency minor unit exponents (how many decimal places)
CURRENCY_EXPONENT = {
    "EUR": 2,
    "USD": 2,
    "GBP": 2,
    "CHF": 2,
    "JPY": 0,
}

NOTE = "note"
COIN = "coin"

# Largest first.
DENOMINATIONS = (
    (Decimal("500"), NOTE),
    (Decimal("200"), NOTE),
    (Decimal("100"), NOTE),
    (Decimal("50"), NOTE),
    (Decimal("20"), NOTE),
    (Decimal("10"), NOTE),
    (Decimal("5"), NOTE),
    (Decimal("2"), COIN),
    (Decimal("1"), COIN),
    (Decimal("0.50"), COIN),
    (Decimal("0.20"), COIN),
    (Decimal("0.10"), COIN),
    (Decimal("0.05"), COIN),
    (Decimal("0.02"), COIN),
    (Decimal("0.01"), COIN),
)

ZERO = Decimal("0")


def currency_exponent(currency: str) -> int:
    """
    Number of decimal places for a currency. Unknown currencies use 2.

    Examples:
        >>> currency_exponent("EUR")
        2
        >>> currency_exponent("JPY")
        0
    """
    return CURRENCY_EXPONENT.get(currency.upper(), 2)


def quantize_decimal(currency: str) -> Decimal:
    """Smallest unit of a currency, e.g. Decimal('0.01') for EUR."""
    return Decimal(10) ** -currency_exponent(currency)


def to_decimal(amount: Number) -> Decimal:
    if isinstance(amount, Decimal):
        return amount
    if isinstance(amount, float):
        # Go through str to avoid binary float artefacts
        amount = str(amount)
    try:
        return Decimal(amount)
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError(f"{amount!r} is not a valid amount")


def quantize(currency: str, amount: Number) -> Decimal:
    """
    Round to currency decimals, halves away from zero.

    Examples:
        >>> quantize("EUR", "10.125")
        Decimal('10.13')
        >>> quantize("EUR", "10.124")
        Decimal('10.12')
    """
    return to_decimal(amount).quantize(quantize_decimal(currency), rounding=ROUND_HALF_UP)


def within_tolerance(a: Number, b: Number, tolerance: Number = "0.01") -> bool:
    return abs(to_decimal(a) - to_decimal(b)) <= to_decimal(tolerance)


def discount_amount(
    currency: str,
    subtotal: Decimal,
    discount_type: Optional[str],
    value: Optional[Number],
) -> Decimal:
    """
    Amount taken off ``subtotal``, clamped to [0, subtotal].

    A percentage discount takes ``value`` percent of the subtotal; a fixed
    discount takes ``value`` itself. No discount yields zero.
    """
    if not discount_type or value is None:
        return ZERO

    value = to_decimal(value)
    if discount_type == "percentage":
        amount = subtotal * value / Decimal("100")
    else:
        amount = value

    amount = min(max(amount, ZERO), subtotal)
    return quantize(currency, amount)


def settlement_total(currency: str, subtotal: Decimal, discount: Decimal) -> Decimal:
    """round(subtotal - discount), never negative."""
    return max(quantize(currency, subtotal - discount), ZERO)


def change_due(currency: str, cash_received: Optional[Number], total: Decimal) -> Decimal:
    """Change owed for a cash tender. Zero when the cash does not exceed the total."""
    if cash_received is None:
        return ZERO
    received = to_decimal(cash_received)
    if received <= total:
        return ZERO
    return quantize(currency, received - total)


def change_breakdown(change: Number, currency: str = "EUR") -> List[Dict]:
    """
    Greedy decomposition of ``change`` over DENOMINATIONS.

    Each entry is {"value", "count", "kind"} with kind "note" or "coin".
    Denominations with a zero count are omitted; zero change yields [].

    Examples:
        >>> [(str(e["value"]), e["count"]) for e in change_breakdown("13.47")]
        [('10', 1), ('2', 1), ('1', 1), ('0.20', 2), ('0.05', 1), ('0.02', 1)]
    """
    remaining = quantize(currency, change)
    if remaining <= ZERO:
        return []

    breakdown = []
    for value, kind in DENOMINATIONS:
        if remaining < value:
            continue
        count = int((remaining / value).to_integral_value(rounding=ROUND_DOWN))
        remaining -= value * count
        breakdown.append({"value": value, "count": count, "kind": kind})
        if remaining == ZERO:
            break
    return breakdown


def split_breakdown(breakdown: List[Dict]) -> Dict[str, List[Dict]]:
    """Separates a breakdown into notes and coins, keeping the order."""
    return {
        "notes": [entry for entry in breakdown if entry["kind"] == NOTE],
        "coins": [entry for entry in breakdown if entry["kind"] == COIN],
    }


def breakdown_sum(breakdown: List[Dict]) -> Decimal:
    return sum((entry["value"] * entry["count"] for entry in breakdown), ZERO)
