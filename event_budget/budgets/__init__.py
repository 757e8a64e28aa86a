"""Budget item payment schedules.

This package provides everything between a budget item's total and the
payments recorded against it:
- Value types for items, installments and payments
- Even splitting and sequential payment allocation
- Payment validation
- The immutable schedule state and its transitions
- Budget-wide overview tables
- JSON storage of items, installments and payments
"""

from .models import (
    AllocationRow,
    BudgetItem,
    Installment,
    InstallmentStatus,
    Payment,
    Priority,
)
from .calculations import (
    allocate_sequential,
    compare_schedule,
    derive_status,
    evaluate_schedule,
    next_payment_suggestion,
    order_installments,
    split_even,
    total_paid,
)
from .validation import (
    ValidationError,
    ValidationReason,
    remaining_balance,
    validate_payment,
)
from .schedule import (
    TRANSITIONS,
    ScheduleState,
    add_installment,
    apply_transition,
    delete_payment,
    edit_installment,
    new_schedule,
    record_payment,
    remove_installment,
    set_item_costs,
)
from .summary import (
    budget_rows_dataframe,
    budget_summary,
    persistable_installments,
)
from .storage import BudgetStorage

__all__ = [
    # Models
    'AllocationRow',
    'BudgetItem',
    'Installment',
    'InstallmentStatus',
    'Payment',
    'Priority',
    # Calculations
    'allocate_sequential',
    'compare_schedule',
    'derive_status',
    'evaluate_schedule',
    'next_payment_suggestion',
    'order_installments',
    'split_even',
    'total_paid',
    # Validation
    'ValidationError',
    'ValidationReason',
    'remaining_balance',
    'validate_payment',
    # Schedule
    'TRANSITIONS',
    'ScheduleState',
    'add_installment',
    'apply_transition',
    'delete_payment',
    'edit_installment',
    'new_schedule',
    'record_payment',
    'remove_installment',
    'set_item_costs',
    # Overview
    'budget_rows_dataframe',
    'budget_summary',
    'persistable_installments',
    # Storage
    'BudgetStorage',
]
