#!/usr/bin/env python3
"""Show the evaluated payment schedule of a stored budget item."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from event_budget.budgets import BudgetStorage, budget_rows_dataframe
from event_budget.config import configure_logging
from event_budget.formatting import format_currency


def main(item_id: str, budgets_dir: Optional[Path] = None) -> int:
    storage = BudgetStorage(budgets_dir)
    try:
        state = storage.read_budget_item(item_id)
    except FileNotFoundError:
        print(f"Budget item not found: {item_id}")
        return 1

    print(f"{state.item.name or state.item.id}")
    print(f"  Total:     {format_currency(state.total)}")
    print(f"  Paid:      {format_currency(state.paid)}")
    print(f"  Remaining: {format_currency(state.remaining)}")
    print(f"  Suggested next payment: {format_currency(state.next_payment())}")

    frame = budget_rows_dataframe(
        [state.item],
        {state.item.id: state.installments},
        {state.item.id: state.payments},
    )
    columns: List[str] = ['label', 'due_date', 'amount', 'covered', 'remaining', 'status', 'priority']
    print("\nInstallments:")
    print(frame[columns].to_string(index=False))
    return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Show the payment schedule of a budget item.')
    parser.add_argument('item_id', help='Id of the stored budget item')
    parser.add_argument('--budgets-dir', type=Path, default=None, help='Directory holding budget files')
    parser.add_argument('--log-level', default=None, help='Log level for the event_budget package')
    args = parser.parse_args()
    configure_logging(args.log_level)
    raise SystemExit(main(args.item_id, budgets_dir=args.budgets_dir))
