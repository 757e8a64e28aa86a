"""Value types for budget items, their installments and recorded payments.

All types are frozen dataclasses; changes go through ``dataclasses.replace``
(see ``schedule.py``) so a state is never modified in place.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, Optional

from ..dates import as_local_day, to_ymd


class Priority(Enum):
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'

    @property
    def weight(self) -> int:
        return {'low': 1, 'medium': 2, 'high': 3}[self.value]

    @classmethod
    def coerce(cls, value: Any) -> Optional['Priority']:
        """Return the matching priority, or ``None`` for blanks and unknown labels."""
        if isinstance(value, cls):
            return value
        if not value:
            return None
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


class InstallmentStatus(Enum):
    PAID = 'Paid'
    OVERDUE = 'Overdue'
    PENDING = 'Pending'


def to_amount(value: Any) -> float:
    """Parse a user-entered amount; blanks and garbage count as zero."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 0.0
    return parsed if math.isfinite(parsed) else 0.0


@dataclass(frozen=True)
class BudgetItem:
    id: str
    name: str = ''
    unit_cost: float = 0.0
    quantity: float = 1.0
    description: str = ''
    estimated_cost: Optional[float] = None

    @property
    def total_amount(self) -> float:
        """Unit cost times quantity, never negative.

        Falls back to the estimated cost while no actual cost is known.
        """
        actual = max(0.0, round(to_amount(self.unit_cost) * to_amount(self.quantity), 2))
        if actual == 0 and self.estimated_cost:
            return max(0.0, round(to_amount(self.estimated_cost), 2))
        return actual

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'unit_cost': self.unit_cost,
            'quantity': self.quantity,
            'description': self.description,
            'estimated_cost': self.estimated_cost,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BudgetItem':
        estimated = data.get('estimated_cost')
        return cls(
            id=str(data['id']),
            name=data.get('name') or '',
            unit_cost=to_amount(data.get('unit_cost')),
            quantity=to_amount(data.get('quantity', 1)),
            description=data.get('description') or '',
            estimated_cost=to_amount(estimated) if estimated not in (None, '') else None,
        )


@dataclass(frozen=True)
class Installment:
    amount: float = 0.0
    due_date: Optional[date] = None
    priority: Optional[Priority] = None
    assignee: Optional[str] = None
    sequence_number: Optional[int] = None
    id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'sequence_number': self.sequence_number,
            'amount': self.amount,
            'due_date': to_ymd(self.due_date),
            'priority': self.priority.value if self.priority else None,
            'assignee': self.assignee,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Installment':
        sequence = data.get('sequence_number')
        return cls(
            amount=round(max(0.0, to_amount(data.get('amount'))), 2),
            due_date=as_local_day(data.get('due_date')),
            priority=Priority.coerce(data.get('priority')),
            assignee=data.get('assignee') or None,
            sequence_number=int(sequence) if sequence else None,
            id=data.get('id'),
        )


@dataclass(frozen=True)
class Payment:
    amount: float
    payment_date: date
    id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'amount': self.amount,
            'payment_date': to_ymd(self.payment_date),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Payment':
        payment_date = as_local_day(data.get('payment_date'))
        if payment_date is None:
            raise ValueError(f"Payment {data.get('id')!r} has no valid payment_date")
        return cls(amount=to_amount(data.get('amount')), payment_date=payment_date, id=data.get('id'))


@dataclass(frozen=True)
class AllocationRow:
    """Coverage of one installment by the payments recorded so far."""

    installment: Installment
    position: int
    amount_covered: float
    amount_remaining: float
    cumulative_scheduled: float
    status: InstallmentStatus = InstallmentStatus.PENDING

    @property
    def due_date(self) -> Optional[date]:
        return self.installment.due_date

    @property
    def amount(self) -> float:
        return self.installment.amount
