#!/usr/bin/env python3
"""Report stored budget items whose installments do not add up to their total."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from event_budget.budgets import BudgetStorage, ScheduleState, compare_schedule
from event_budget.config import MISMATCH_TOLERANCE, configure_logging
from event_budget.formatting import format_currency


def validate_state(state: ScheduleState) -> Dict[str, str]:
    errors = []
    if state.installments:
        comparison = compare_schedule(state.total, [row.amount for row in state.installments])
        if abs(comparison['diff']) > MISMATCH_TOLERANCE:
            verb = 'exceeds' if comparison['diff'] > 0 else 'is short of'
            errors.append(f"schedule {verb} the total by {format_currency(abs(comparison['diff']))}")
    if state.paid > state.total + MISMATCH_TOLERANCE:
        errors.append(f"payments exceed the total by {format_currency(state.paid - state.total)}")

    if errors:
        return {"name": state.item.name or state.item.id, "errors": "; ".join(errors)}
    return {}


def main(budgets_dir: Optional[Path] = None) -> int:
    storage = BudgetStorage(budgets_dir)
    states = storage.load_all()
    if not states:
        print(f"No budget items found in {storage.budgets_dir}")
        return 0

    issues = []
    for item_id, state in sorted(states.items()):
        result = validate_state(state)
        if result:
            issues.append((item_id, result['errors']))

    if issues:
        print("Budget validation failed:")
        for item_id, message in issues:
            print(f"  - {item_id}: {message}")
        return 1

    print(f"All {len(states)} budget items validated successfully.")
    return 0


if __name__ == "__main__":
    configure_logging()
    raise SystemExit(main())
