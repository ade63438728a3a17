from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Union

from django.utils import timezone

# Donation.amount is DecimalField(max_digits=10, decimal_places=2)
MAX_AMOUNT = Decimal("100000000")
CENT = Decimal("0.01")

RECEIPT_PREFIX = "REC"
RECEIPT_TIME_FORMAT = "%Y%m%d%H%M%S"


def normalize_amount(value: Union[int, float, str, Decimal]) -> Decimal:
    """
    Turn a JSON number or numeric string into a cent-quantized Decimal.
    Raises ValueError for anything that is not a finite amount in [0, MAX_AMOUNT).
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise ValueError("amount must be a number")
    # str() keeps floats like 12.3 from turning into 12.2999…
    s = value.strip() if isinstance(value, str) else str(value)
    try:
        amount = Decimal(s)
    except (InvalidOperation, ValueError):
        raise ValueError("amount must be a number")
    if not amount.is_finite():
        raise ValueError("amount must be a finite number")
    if amount < 0:
        raise ValueError("amount must not be negative")
    # huge exponents cannot be quantized, so bound before and after rounding
    if amount >= MAX_AMOUNT:
        raise ValueError(f"amount must be below {MAX_AMOUNT}")
    amount = abs(amount.quantize(CENT))  # abs() folds -0 into 0
    if amount >= MAX_AMOUNT:
        raise ValueError(f"amount must be below {MAX_AMOUNT}")
    return amount


def build_receipt_number(donation_id: int, issued_at: datetime) -> str:
    """
    REC-<donation id>-<YYYYMMDDHHMMSS>, with the time in the project zone.
    Sortable by issue time within a donation, unique because the id is.
    """
    if timezone.is_aware(issued_at):
        issued_at = timezone.localtime(issued_at)
    return f"{RECEIPT_PREFIX}-{donation_id}-{issued_at.strftime(RECEIPT_TIME_FORMAT)}"
