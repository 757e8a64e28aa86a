"""Budget item storage and file I/O operations.

This module is the persistence collaborator of the schedule logic: it
reads and writes one JSON document per budget item (the item, its
installments and its payments). The reconciliation functions never call
it; callers load a ``ScheduleState``, run transitions and save at explicit
save points.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from ..config import BUDGETS_DIR, ensure_data_directories
from ..dates import as_local_day
from .models import BudgetItem, Installment, Payment, to_amount
from .schedule import ScheduleState
from .summary import persistable_installments

logger = logging.getLogger(__name__)

STORAGE_VERSION = 1


def item_filename(item_id: str) -> str:
    """Turn an item id into a safe file stem.

    Keeps alphanumerics, underscores and hyphens; everything else becomes
    an underscore.

    Example:
        >>> item_filename('flowers / 2025')
        'flowers_2025'
    """
    cleaned = ''.join(c if c.isalnum() or c in {'_', '-'} else '_' for c in str(item_id).strip())
    while '__' in cleaned:
        cleaned = cleaned.replace('__', '_')
    cleaned = cleaned.strip('_')
    if not cleaned:
        raise ValueError("Budget item id cannot be empty")
    return cleaned


class BudgetStorage:
    """Handles budget item file storage operations."""

    def __init__(self, budgets_dir: Optional[Path] = None):
        """Initialize budget storage.

        Args:
            budgets_dir: Optional custom directory for budget files.
                        Defaults to BUDGETS_DIR from config.
        """
        if budgets_dir is None:
            ensure_data_directories()
        self.budgets_dir = Path(budgets_dir or BUDGETS_DIR)
        self.budgets_dir.mkdir(parents=True, exist_ok=True)

    def get_path(self, item_id: str) -> Path:
        return self.budgets_dir / f"{item_filename(item_id)}.json"

    def _read_document(self, item_id: str) -> Dict[str, Any]:
        path = self.get_path(item_id)
        if not path.exists():
            raise FileNotFoundError(f"Budget item '{item_id}' not found at {path}")
        with path.open('r', encoding='utf-8') as handle:
            data = json.load(handle)
        if not isinstance(data, dict) or not isinstance(data.get('item'), dict):
            raise ValueError(f"Budget file {path} is not a budget item document")
        return data

    def _write_document(self, item_id: str, data: Dict[str, Any]) -> None:
        path = self.get_path(item_id)
        data['saved_at'] = datetime.now().isoformat(timespec='seconds')
        data['version'] = STORAGE_VERSION
        with path.open('w', encoding='utf-8') as handle:
            json.dump(data, handle, indent=2, sort_keys=True)

    @staticmethod
    def _state_from_document(data: Dict[str, Any]) -> ScheduleState:
        installments = data.get('installments') or []
        payments = data.get('payments') or []
        if not isinstance(installments, list):
            installments = []
        if not isinstance(payments, list):
            payments = []
        item = BudgetItem.from_dict(data['item'])
        loaded = []
        for row in payments:
            if not isinstance(row, dict):
                continue
            try:
                loaded.append(Payment.from_dict(row))
            except ValueError as exc:
                logger.warning("Skipping payment of budget item %s: %s", item.id, exc)
        return ScheduleState(
            item=item,
            installments=tuple(Installment.from_dict(row) for row in installments if isinstance(row, dict)),
            payments=tuple(loaded),
        )

    def save_item(self, item: BudgetItem) -> None:
        """Create or update an item, keeping any stored installments and payments."""
        if not item.id or not str(item.id).strip():
            raise ValueError("Budget item id cannot be empty")
        path = self.get_path(item.id)
        data = self._read_document(item.id) if path.exists() else {'installments': [], 'payments': []}
        data['item'] = item.to_dict()
        self._write_document(item.id, data)
        logger.info("Saved budget item %s", item.id)

    def save_state(self, state: ScheduleState) -> None:
        """Save the item and its installments; payments go through ``append_payment``."""
        self.save_item(state.item)
        self.write_installments(state.item.id, state.installments)

    def read_budget_item(self, item_id: str) -> ScheduleState:
        return self._state_from_document(self._read_document(item_id))

    def write_installments(self, item_id: str, installments: Iterable[Installment]) -> None:
        """Replace the stored installments with the savable ones from ``installments``."""
        data = self._read_document(item_id)
        rows = persistable_installments(installments)
        data['installments'] = [row.to_dict() for row in rows]
        self._write_document(item_id, data)
        logger.info("Wrote %d installments for budget item %s", len(rows), item_id)

    def append_payment(self, item_id: str, amount: Any, payment_date: Any, payment_id: Optional[str] = None) -> Payment:
        day = as_local_day(payment_date)
        if day is None:
            raise ValueError("Payment date is required")
        data = self._read_document(item_id)
        payment = Payment(amount=to_amount(amount), payment_date=day, id=payment_id or uuid.uuid4().hex)
        data.setdefault('payments', []).append(payment.to_dict())
        self._write_document(item_id, data)
        logger.info("Appended payment %s of %.2f to budget item %s", payment.id, payment.amount, item_id)
        return payment

    def delete_payment(self, item_id: str, payment_id: str) -> bool:
        """Delete a payment; returns ``False`` when it was not stored."""
        data = self._read_document(item_id)
        payments = data.get('payments') or []
        kept = [row for row in payments if row.get('id') != payment_id]
        if len(kept) == len(payments):
            return False
        data['payments'] = kept
        self._write_document(item_id, data)
        logger.info("Deleted payment %s from budget item %s", payment_id, item_id)
        return True

    def load_all(self) -> Dict[str, ScheduleState]:
        """Load every stored item.

        Note:
            Files that cannot be parsed are skipped with a warning.
        """
        states: Dict[str, ScheduleState] = {}
        for budget_file in sorted(self.budgets_dir.glob('*.json')):
            try:
                with budget_file.open('r', encoding='utf-8') as handle:
                    data = json.load(handle)
                if not isinstance(data, dict) or not isinstance(data.get('item'), dict):
                    logger.warning("Skipping %s: not a budget item document", budget_file.name)
                    continue
                state = self._state_from_document(data)
            except (json.JSONDecodeError, OSError, KeyError, ValueError) as exc:
                logger.warning("Could not load budget file %s: %s", budget_file.name, exc)
                continue
            states[state.item.id] = state
        return states

    def delete_item(self, item_id: str) -> bool:
        path = self.get_path(item_id)
        if not path.exists():
            return False
        path.unlink()
        logger.info("Deleted budget item %s", item_id)
        return True
