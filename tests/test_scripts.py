import importlib.util
from datetime import date
from pathlib import Path

from event_budget.budgets import BudgetItem, BudgetStorage, Installment

SCRIPTS_DIR = Path(__file__).resolve().parents[1] / 'scripts'


def _load_script(name):
    spec = importlib.util.spec_from_file_location(f'{name}_test', SCRIPTS_DIR / f'{name}.py')
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _store(tmp_path, installments):
    storage = BudgetStorage(tmp_path)
    storage.save_item(BudgetItem(id='dj', name='DJ', unit_cost=600, quantity=1))
    storage.write_installments('dj', installments)
    return storage


def test_validate_budgets_passes_for_balanced_schedule(tmp_path, capsys):
    module = _load_script('validate_budgets')
    _store(tmp_path, [
        Installment(amount=300, due_date=date(2025, 1, 1)),
        Installment(amount=300, due_date=date(2025, 2, 1)),
    ])

    assert module.main(tmp_path) == 0
    assert 'validated successfully' in capsys.readouterr().out


def test_validate_budgets_reports_mismatch(tmp_path, capsys):
    module = _load_script('validate_budgets')
    _store(tmp_path, [Installment(amount=250, due_date=date(2025, 1, 1))])

    assert module.main(tmp_path) == 1
    out = capsys.readouterr().out
    assert 'dj' in out
    assert 'is short of the total by $350.00' in out


def test_validate_budgets_with_no_items(tmp_path, capsys):
    module = _load_script('validate_budgets')
    assert module.main(tmp_path) == 0
    assert 'No budget items found' in capsys.readouterr().out


def test_show_budget_schedule(tmp_path, capsys):
    module = _load_script('show_budget_schedule')
    storage = _store(tmp_path, [
        Installment(amount=300, due_date=date(2025, 1, 1)),
        Installment(amount=300, due_date=date(2025, 2, 1)),
    ])
    storage.append_payment('dj', 100, '2024-12-20')

    assert module.main('dj', budgets_dir=tmp_path) == 0
    out = capsys.readouterr().out
    assert 'Paid:      $100.00' in out
    assert 'Suggested next payment: $200.00' in out
    assert '1 / 2' in out


def test_show_budget_schedule_unknown_item(tmp_path, capsys):
    module = _load_script('show_budget_schedule')
    assert module.main('ghost', budgets_dir=tmp_path) == 1
    assert 'not found' in capsys.readouterr().out
