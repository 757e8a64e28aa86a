"""Checks applied before a payment is handed to storage."""

from __future__ import annotations

import logging
from datetime import date
from enum import Enum
from typing import Any, Optional, Tuple

from ..config import OVERPAYMENT_TOLERANCE
from ..dates import as_local_day
from ..formatting import format_currency
from .models import to_amount

logger = logging.getLogger(__name__)


class ValidationReason(Enum):
    INVALID_AMOUNT = 'invalid_amount'
    OVERPAYMENT_EXCEEDED = 'overpayment_exceeded'


class ValidationError(ValueError):
    """A proposed payment was rejected; it must not be recorded."""

    def __init__(self, reason: ValidationReason, message: str, *, excess: float = 0.0):
        super().__init__(message)
        self.reason = reason
        self.excess = excess


def remaining_balance(total: Any, paid: Any) -> float:
    return max(0.0, round(to_amount(total) - to_amount(paid), 2))


def validate_payment(amount: Any, payment_date: Any, total: Any, paid: Any) -> Tuple[float, date]:
    """Validate a proposed payment against the item's remaining balance.

    The balance is global for the item (total minus everything paid),
    not the balance of any single installment.

    Args:
        amount: Proposed payment amount
        payment_date: Date of the payment (``date`` or ``YYYY-MM-DD``)
        total: Budget item total
        paid: Sum of the payments already recorded for the item

    Returns:
        The parsed ``(amount, payment_date)``

    Raises:
        ValidationError: ``INVALID_AMOUNT`` for a non-positive amount or a
            missing date, ``OVERPAYMENT_EXCEEDED`` when the amount is more
            than half a cent above the remaining balance
    """
    value = _parse_positive(amount)
    if value is None:
        raise ValidationError(ValidationReason.INVALID_AMOUNT, f"Payment amount must be a positive number, got {amount!r}")

    day = as_local_day(payment_date)
    if day is None:
        raise ValidationError(ValidationReason.INVALID_AMOUNT, "Payment date is required")

    remaining = remaining_balance(total, paid)
    if value > remaining + OVERPAYMENT_TOLERANCE:
        excess = round(value - remaining, 2)
        logger.warning("Rejected payment of %.2f; only %.2f remains", value, remaining)
        raise ValidationError(
            ValidationReason.OVERPAYMENT_EXCEEDED,
            f"The amount entered ({format_currency(value)}) exceeds the pending balance "
            f"({format_currency(remaining)}) by {format_currency(excess)}.",
            excess=excess,
        )
    return value, day


def _parse_positive(amount: Any) -> Optional[float]:
    if amount is None or isinstance(amount, bool) or amount == '':
        return None
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return None
    if not value > 0 or value == float('inf'):
        return None
    return value
