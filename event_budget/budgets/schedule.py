"""Immutable payment schedule of one budget item and its named transitions.

Every change to a schedule (editing costs, adding, removing or editing an
installment, recording or deleting a payment) is a function that takes a
``ScheduleState`` and returns a new one. ``apply_transition`` dispatches by
name so callers can drive a schedule from UI events or replay a list of
actions.

Invariant kept by every transition: with exactly one installment, its
amount equals the item total.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..config import DEFAULT_PRIORITY
from ..dates import Clock, SystemClock, add_months, as_local_day
from .calculations import evaluate_schedule, next_payment_suggestion, round_cents, split_even, total_paid
from .models import AllocationRow, BudgetItem, Installment, Payment, Priority, to_amount
from .validation import remaining_balance, validate_payment

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {'amount', 'due_date', 'priority', 'assignee'}


@dataclass(frozen=True)
class ScheduleState:
    item: BudgetItem
    installments: Tuple[Installment, ...] = field(default_factory=tuple)
    payments: Tuple[Payment, ...] = field(default_factory=tuple)

    @property
    def total(self) -> float:
        return self.item.total_amount

    @property
    def paid(self) -> float:
        return total_paid(self.payments)

    @property
    def remaining(self) -> float:
        return remaining_balance(self.total, self.paid)

    def rows(self, clock: Optional[Clock] = None) -> List[AllocationRow]:
        return evaluate_schedule(self.installments, self.payments, clock)

    def next_payment(self, clock: Optional[Clock] = None) -> float:
        return next_payment_suggestion(self.rows(clock))


def _numbered(installments) -> Tuple[Installment, ...]:
    return tuple(
        row if row.sequence_number == index + 1 else replace(row, sequence_number=index + 1)
        for index, row in enumerate(installments)
    )


def _with_installments(state: ScheduleState, installments) -> ScheduleState:
    rows = _numbered(installments)
    if len(rows) == 1 and rows[0].amount != state.total:
        rows = (replace(rows[0], amount=state.total),)
    return replace(state, installments=rows)


def _check_index(state: ScheduleState, index: int) -> None:
    if not 0 <= index < len(state.installments):
        raise IndexError(f"No installment at position {index} (schedule has {len(state.installments)})")


def new_schedule(item: BudgetItem, clock: Optional[Clock] = None) -> ScheduleState:
    """Start a schedule with a single installment due today."""
    today = (clock or SystemClock()).today()
    first = Installment(amount=item.total_amount, due_date=today, priority=Priority(DEFAULT_PRIORITY))
    return _with_installments(ScheduleState(item=item), [first])


def set_item_costs(
    state: ScheduleState,
    unit_cost: Any = None,
    quantity: Any = None,
    estimated_cost: Any = None,
) -> ScheduleState:
    """Change the item's cost inputs; arguments left as ``None`` are kept."""
    changes: Dict[str, Any] = {}
    if unit_cost is not None:
        changes['unit_cost'] = to_amount(unit_cost)
    if quantity is not None:
        changes['quantity'] = to_amount(quantity)
    if estimated_cost is not None:
        changes['estimated_cost'] = to_amount(estimated_cost)
    updated = replace(state, item=replace(state.item, **changes))
    logger.debug("Item %s total is now %.2f", updated.item.id, updated.total)
    return _with_installments(updated, updated.installments)


def add_installment(state: ScheduleState, clock: Optional[Clock] = None) -> ScheduleState:
    """Append an installment one month after the last one and re-split.

    Amounts are overwritten with an even split of the total, discarding
    manual edits. With a zero total the amounts are left alone.
    """
    rows = list(state.installments)
    last_due = rows[-1].due_date if rows else None
    base = last_due or (clock or SystemClock()).today()
    rows.append(Installment(amount=0.0, due_date=add_months(base, 1), priority=Priority(DEFAULT_PRIORITY)))

    if state.total > 0:
        parts = split_even(state.total, len(rows))
        rows = [replace(row, amount=parts[index]) for index, row in enumerate(rows)]

    logger.debug("Added installment %d to item %s", len(rows), state.item.id)
    return _with_installments(state, rows)


def remove_installment(state: ScheduleState, index: int) -> ScheduleState:
    """Drop the installment at ``index``; remaining amounts are not re-split."""
    _check_index(state, index)
    rows = [row for position, row in enumerate(state.installments) if position != index]
    logger.debug("Removed installment %d from item %s", index + 1, state.item.id)
    return _with_installments(state, rows)


def edit_installment(state: ScheduleState, index: int, **changes: Any) -> ScheduleState:
    """Edit one installment's amount, due date, priority or assignee."""
    _check_index(state, index)
    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot edit installment fields: {', '.join(sorted(unknown))}")

    values: Dict[str, Any] = {}
    if 'amount' in changes:
        values['amount'] = round_cents(max(0.0, to_amount(changes['amount'])))
    if 'due_date' in changes:
        values['due_date'] = as_local_day(changes['due_date'])
    if 'priority' in changes:
        values['priority'] = Priority.coerce(changes['priority'])
    if 'assignee' in changes:
        values['assignee'] = changes['assignee'] or None

    rows = list(state.installments)
    rows[index] = replace(rows[index], **values)
    return _with_installments(state, rows)


def record_payment(
    state: ScheduleState,
    amount: Any,
    payment_date: Any,
    payment_id: Optional[str] = None,
) -> ScheduleState:
    """Validate and append a payment.

    Raises:
        ValidationError: when the amount or date is invalid or the payment
            would overpay the item
    """
    value, day = validate_payment(amount, payment_date, state.total, state.paid)
    payment = Payment(amount=value, payment_date=day, id=payment_id or uuid.uuid4().hex)
    logger.info("Recorded payment %s of %.2f for item %s", payment.id, value, state.item.id)
    return replace(state, payments=state.payments + (payment,))


def delete_payment(state: ScheduleState, payment_id: str) -> ScheduleState:
    remaining = tuple(payment for payment in state.payments if payment.id != payment_id)
    if len(remaining) == len(state.payments):
        raise KeyError(payment_id)
    logger.info("Deleted payment %s from item %s", payment_id, state.item.id)
    return replace(state, payments=remaining)


TRANSITIONS: Dict[str, Callable[..., ScheduleState]] = {
    'set_item_costs': set_item_costs,
    'add_installment': add_installment,
    'remove_installment': remove_installment,
    'edit_installment': edit_installment,
    'record_payment': record_payment,
    'delete_payment': delete_payment,
}


def apply_transition(state: ScheduleState, name: str, **kwargs: Any) -> ScheduleState:
    """Run the transition called ``name`` against ``state``."""
    try:
        transition = TRANSITIONS[name]
    except KeyError:
        raise ValueError(f"Unknown schedule transition: {name!r}") from None
    return transition(state, **kwargs)
