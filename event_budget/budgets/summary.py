"""Budget-wide overview built from the per-item schedules.

This module flattens every item's installments into one table, derives the
headline figures shown above the budget list (total, paid, pending,
overdue, next payment due) and holds the policy deciding which drafted
installments are worth saving.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..config import MISMATCH_TOLERANCE
from ..dates import Clock, FixedClock, SystemClock
from .calculations import evaluate_schedule, round_cents, total_paid
from .models import BudgetItem, Installment, InstallmentStatus, Payment, Priority

ROW_COLUMNS = [
    'item_id', 'item_name', 'installment', 'label', 'amount', 'covered',
    'remaining', 'due_date', 'priority', 'assignee', 'status', 'virtual',
]

PRIORITY_WEIGHTS = {priority.value: priority.weight for priority in Priority}


def persistable_installments(installments: Iterable[Installment]) -> Tuple[Installment, ...]:
    """Keep installments with a positive amount and a due date, renumbered 1..N.

    Example:
        >>> rows = [Installment(amount=0), Installment(amount=50, due_date=date(2025, 1, 1))]
        >>> [row.sequence_number for row in persistable_installments(rows)]
        [1]
    """
    kept = [row for row in installments if row.amount > 0 and row.due_date]
    return tuple(replace(row, sequence_number=index + 1) for index, row in enumerate(kept))


def budget_rows_dataframe(
    items: Iterable[BudgetItem],
    schedules_by_item: Mapping[str, Sequence[Installment]],
    payments_by_item: Mapping[str, Sequence[Payment]],
    clock: Optional[Clock] = None,
) -> pd.DataFrame:
    """Create one row per installment across all budget items.

    Items without installments get a single virtual installment for their
    whole total with no due date, so nothing owed drops out of the list.

    Args:
        items: Budget items to include
        schedules_by_item: Installments keyed by item id
        payments_by_item: Recorded payments keyed by item id
        clock: Source of "today"; read once for the whole table

    Returns:
        DataFrame with ``ROW_COLUMNS``, sorted by due date (missing dates
        last) and then by priority, high first
    """
    pass_clock = FixedClock((clock or SystemClock()).today())

    records: List[Dict[str, Any]] = []
    for item in items:
        installments = list(schedules_by_item.get(item.id) or [])
        virtual = not installments
        if virtual:
            installments = [Installment(amount=item.total_amount)]

        rows = evaluate_schedule(installments, payments_by_item.get(item.id) or [], pass_clock)
        for row in rows:
            records.append({
                'item_id': item.id,
                'item_name': item.name,
                'installment': row.position,
                'label': f"{row.position} / {len(rows)}",
                'amount': round_cents(row.amount),
                'covered': row.amount_covered,
                'remaining': row.amount_remaining,
                'due_date': pd.Timestamp(row.due_date) if row.due_date else pd.NaT,
                'priority': row.installment.priority.value if row.installment.priority else None,
                'assignee': row.installment.assignee,
                'status': row.status.value,
                'virtual': virtual,
            })

    if not records:
        return pd.DataFrame(columns=ROW_COLUMNS)

    frame = pd.DataFrame(records, columns=ROW_COLUMNS)
    frame['due_date'] = pd.to_datetime(frame['due_date'])
    frame['__priority_weight__'] = frame['priority'].map(PRIORITY_WEIGHTS).fillna(0)
    frame = frame.sort_values(
        ['due_date', '__priority_weight__'],
        ascending=[True, False],
        na_position='last',
    )
    return frame.drop(columns='__priority_weight__').reset_index(drop=True)


def budget_summary(
    items: Iterable[BudgetItem],
    schedules_by_item: Mapping[str, Sequence[Installment]],
    payments_by_item: Mapping[str, Sequence[Payment]],
    clock: Optional[Clock] = None,
) -> Dict[str, Any]:
    """Calculate the headline figures for a whole budget.

    Returns:
        Dictionary with ``total``, ``paid``, ``pending``, ``percent_paid``,
        ``scheduled_total``, ``schedule_mismatch``, ``overdue_amount``,
        ``overdue_count``, ``next_due_amount`` and ``next_due_date``
    """
    items = list(items)
    total = round_cents(sum(item.total_amount for item in items))
    paid = round_cents(sum(total_paid(payments_by_item.get(item.id) or []) for item in items))
    pending = max(0.0, round_cents(total - paid))
    percent_paid = int(min(100, max(0, round(paid * 100 / total)))) if total > 0 else 0

    frame = budget_rows_dataframe(items, schedules_by_item, payments_by_item, clock)
    scheduled = round_cents(frame['amount'].sum()) if not frame.empty else 0.0

    summary: Dict[str, Any] = {
        'total': total,
        'paid': paid,
        'pending': pending,
        'percent_paid': percent_paid,
        'scheduled_total': scheduled,
        'schedule_mismatch': abs(scheduled - total) > MISMATCH_TOLERANCE,
        'overdue_amount': 0.0,
        'overdue_count': 0,
        'next_due_amount': 0.0,
        'next_due_date': None,
    }
    if frame.empty:
        return summary

    overdue_mask = frame['status'] == InstallmentStatus.OVERDUE.value
    summary['overdue_amount'] = round_cents(float(np.where(overdue_mask, frame['remaining'], 0.0).sum()))
    summary['overdue_count'] = int(overdue_mask.sum())

    upcoming = frame[(frame['status'] != InstallmentStatus.PAID.value) & frame['due_date'].notna()]
    if not upcoming.empty:
        first = upcoming.iloc[0]
        summary['next_due_amount'] = float(first['remaining'])
        summary['next_due_date'] = first['due_date'].date()
    return summary
