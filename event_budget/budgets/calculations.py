"""Installment split and payment reconciliation.

This module provides the pure functions behind the payment schedule of a
budget item: splitting a total across installments, applying the total
paid to installments in order, deriving each installment's status and
suggesting the next payment. None of them raise on user-derived input;
out-of-range values are clamped.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ..config import PAID_EPSILON
from ..dates import Clock, SystemClock
from .models import AllocationRow, Installment, InstallmentStatus, Payment, to_amount

logger = logging.getLogger(__name__)

_CENT = Decimal('0.01')


def _to_decimal(value: Any) -> Decimal:
    try:
        return Decimal(str(to_amount(value)))
    except InvalidOperation:
        return Decimal(0)


def round_cents(value: float) -> float:
    """Round half-up to two decimals."""
    return float(_to_decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP))


def split_even(total: Any, count: Any) -> List[float]:
    """Split ``total`` into ``count`` installments of (almost) equal size.

    Every installment gets ``total / count`` floored to the cent; the last
    one also absorbs the rounding remainder so the parts always add up to
    the total.

    Args:
        total: Amount to split; negative values are treated as zero
        count: Number of installments; values below one are treated as one

    Returns:
        List of ``count`` amounts

    Example:
        >>> split_even(1000, 3)
        [333.33, 333.33, 333.34]
    """
    amount = max(Decimal(0), _to_decimal(total))
    try:
        parts = max(1, int(count or 1))
    except (TypeError, ValueError):
        parts = 1

    base = (amount / parts).quantize(_CENT, rounding=ROUND_FLOOR)
    remainder = (amount - base * parts).quantize(_CENT, rounding=ROUND_HALF_UP)
    result = [base] * parts
    result[-1] = (base + remainder).quantize(_CENT, rounding=ROUND_HALF_UP)
    return [float(part) for part in result]


def _ordered_pairs(installments: Iterable[Installment]) -> List[Tuple[int, Installment]]:
    pairs = list(enumerate(installments))
    if pairs and all(row.sequence_number for _, row in pairs):
        return sorted(pairs, key=lambda pair: pair[1].sequence_number)
    if pairs and all(row.due_date for _, row in pairs):
        return sorted(pairs, key=lambda pair: pair[1].due_date)
    return pairs


def order_installments(installments: Iterable[Installment]) -> List[Installment]:
    """Order installments for allocation.

    By sequence number when every installment has one, otherwise by due
    date when every installment has one, otherwise input order.
    """
    return [row for _, row in _ordered_pairs(installments)]


def total_paid(payments: Iterable[Payment]) -> float:
    return round_cents(sum(to_amount(payment.amount) for payment in payments))


def allocate_sequential(installments: Iterable[Installment], paid: float) -> List[AllocationRow]:
    """Apply ``paid`` to installments in order, filling each before the next.

    Amounts are taken to the cent, so no row is covered for more than its
    own amount and the covered amounts never add up to more than ``paid``.
    Rows come back in allocation order with ``status`` left as Pending;
    ``evaluate_schedule`` fills in the real status.
    """
    paid = round_cents(max(0.0, to_amount(paid)))

    allocations: List[AllocationRow] = []
    cumulative = 0.0
    for index, installment in _ordered_pairs(installments):
        amount = round_cents(max(0.0, to_amount(installment.amount)))
        if amount != installment.amount:
            installment = replace(installment, amount=amount)
        covered = min(amount, round_cents(max(0.0, paid - cumulative)))
        cumulative += amount
        allocations.append(AllocationRow(
            installment=installment,
            position=installment.sequence_number or index + 1,
            amount_covered=covered,
            amount_remaining=round_cents(max(0.0, amount - covered)),
            cumulative_scheduled=round_cents(cumulative),
        ))
    return allocations


def derive_status(
    paid: float,
    cumulative_scheduled: float,
    due_date: Optional[date],
    today: date,
) -> InstallmentStatus:
    """Classify one installment from the running scheduled total."""
    if paid + PAID_EPSILON >= cumulative_scheduled:
        return InstallmentStatus.PAID
    if due_date is not None and due_date < today:
        return InstallmentStatus.OVERDUE
    return InstallmentStatus.PENDING


def evaluate_schedule(
    installments: Iterable[Installment],
    payments: Iterable[Payment],
    clock: Optional[Clock] = None,
) -> List[AllocationRow]:
    """Allocate recorded payments over installments and derive each status.

    The clock is read once, so every row is judged against the same day.
    A Paid row is reported as fully covered.
    """
    today = (clock or SystemClock()).today()
    paid = total_paid(payments)

    evaluated = []
    for row in allocate_sequential(installments, paid):
        status = derive_status(paid, row.cumulative_scheduled, row.due_date, today)
        if status is InstallmentStatus.PAID:
            row = replace(row, amount_covered=round_cents(max(0.0, row.amount)), amount_remaining=0.0)
        evaluated.append(replace(row, status=status))

    logger.debug("Evaluated %d installments against %.2f paid on %s", len(evaluated), paid, today)
    return evaluated


def next_payment_suggestion(rows: Sequence[AllocationRow]) -> float:
    """Remaining amount of the first installment that is not yet paid."""
    for row in rows:
        if row.status is not InstallmentStatus.PAID:
            return max(0.0, row.amount_remaining)
    return 0.0


def compare_schedule(total: Any, amounts: Sequence[Any]) -> Dict[str, Any]:
    """Compare the current installment amounts with an even split.

    Returns:
        Dictionary with ``count``, ``suggested`` (even split), ``rows``
        (``current``/``suggested``/``delta`` per installment), ``scheduled``
        (sum of current amounts) and ``diff`` (scheduled minus total;
        positive means the schedule exceeds the total)
    """
    current = [to_amount(value) for value in amounts]
    count = max(1, len(current))
    suggested = split_even(total, count)
    scheduled = round_cents(sum(current))
    rows = [
        {
            'current': value,
            'suggested': suggested[index],
            'delta': round_cents(value - suggested[index]),
        }
        for index, value in enumerate(current)
    ]
    return {
        'count': count,
        'suggested': suggested,
        'rows': rows,
        'scheduled': scheduled,
        'diff': round_cents(scheduled - max(0.0, to_amount(total))),
    }
