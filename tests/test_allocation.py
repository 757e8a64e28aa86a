from datetime import date

import pytest

from event_budget.budgets import (
    Installment,
    InstallmentStatus,
    Payment,
    allocate_sequential,
    compare_schedule,
    derive_status,
    evaluate_schedule,
    next_payment_suggestion,
    order_installments,
    split_even,
)
from event_budget.dates import FixedClock

TODAY = date(2025, 5, 1)


def _installments(total=1000.0, count=3, first_due=date(2025, 6, 1)):
    return [
        Installment(amount=amount, due_date=date(first_due.year, first_due.month + index, 1), sequence_number=index + 1)
        for index, amount in enumerate(split_even(total, count))
    ]


def _payments(*amounts):
    return [Payment(amount=amount, payment_date=date(2025, 4, 1), id=f'p{index}') for index, amount in enumerate(amounts)]


def test_waterfall_covers_installments_in_order():
    rows = evaluate_schedule(_installments(), _payments(400, 300), FixedClock(TODAY))

    assert [row.amount_covered for row in rows] == [333.33, 333.33, 33.34]
    assert [row.amount_remaining for row in rows] == [0.0, 0.0, 300.0]
    assert [row.cumulative_scheduled for row in rows] == [333.33, 666.66, 1000.0]
    assert [row.status for row in rows] == [
        InstallmentStatus.PAID,
        InstallmentStatus.PAID,
        InstallmentStatus.PENDING,
    ]


def test_unpaid_past_due_installment_is_overdue():
    rows = evaluate_schedule(_installments(first_due=date(2025, 2, 1)), _payments(400, 300), FixedClock(TODAY))
    assert rows[2].due_date == date(2025, 4, 1)
    assert rows[2].status == InstallmentStatus.OVERDUE


def test_installment_due_today_is_not_overdue():
    assert derive_status(0.0, 100.0, TODAY, TODAY) == InstallmentStatus.PENDING
    assert derive_status(0.0, 100.0, None, TODAY) == InstallmentStatus.PENDING
    assert derive_status(99.9999999, 100.0 - 0.0000001, TODAY, TODAY) == InstallmentStatus.PAID


def test_status_partition_and_paid_rows_have_nothing_left():
    installments = _installments(first_due=date(2025, 3, 1))
    for paid in [0, 100, 333.33, 500, 666.66, 999.99, 1000, 1500]:
        rows = evaluate_schedule(installments, _payments(paid), FixedClock(TODAY))
        for row in rows:
            assert row.status in set(InstallmentStatus)
            if row.status is InstallmentStatus.PAID:
                assert row.amount_remaining == 0


def test_coverage_never_decreases_and_never_skips_ahead():
    installments = _installments()
    previous = None
    for paid in range(0, 1201, 25):
        rows = allocate_sequential(installments, float(paid))
        covered = [row.amount_covered for row in rows]
        for earlier, later in zip(rows, rows[1:]):
            if earlier.amount_remaining > 0:
                assert later.amount_covered == 0
        if previous is not None:
            assert all(now >= before for now, before in zip(covered, previous))
        previous = covered


def test_total_covered_is_bounded_by_paid_and_schedule():
    installments = _installments()
    partial = allocate_sequential(installments, 450.0)
    assert sum(row.amount_covered for row in partial) == pytest.approx(450.0)

    overpaid = allocate_sequential(installments, 2000.0)
    assert sum(row.amount_covered for row in overpaid) == pytest.approx(1000.0)


def test_sub_cent_amounts_are_never_overcovered():
    rows = allocate_sequential([
        Installment(amount=10.005, sequence_number=1),
        Installment(amount=5, sequence_number=2),
    ], 11)
    assert [row.amount for row in rows] == [10.01, 5]
    assert [row.amount_covered for row in rows] == [10.01, 0.99]

    halves = allocate_sequential([Installment(amount=0.005), Installment(amount=0.005)], 0.01)
    assert [row.amount_covered for row in halves] == [0.01, 0.0]
    assert all(row.amount_covered <= row.amount for row in halves)


def test_sequence_numbers_drive_the_order():
    installments = [
        Installment(amount=200, due_date=date(2025, 1, 1), sequence_number=2),
        Installment(amount=100, due_date=date(2025, 2, 1), sequence_number=1),
    ]
    rows = allocate_sequential(installments, 150.0)
    assert [row.position for row in rows] == [1, 2]
    assert [row.amount_covered for row in rows] == [100.0, 50.0]


def test_due_dates_order_when_sequence_numbers_are_missing():
    late = Installment(amount=200, due_date=date(2025, 9, 1))
    early = Installment(amount=100, due_date=date(2025, 3, 1))
    assert order_installments([late, early]) == [early, late]


def test_input_order_is_kept_without_sequence_or_dates():
    first = Installment(amount=100)
    second = Installment(amount=50, due_date=date(2025, 1, 1))
    assert order_installments([first, second]) == [first, second]


def test_next_payment_suggestion():
    installments = _installments()
    clock = FixedClock(TODAY)

    assert next_payment_suggestion(evaluate_schedule(installments, [], clock)) == 333.33
    assert next_payment_suggestion(evaluate_schedule(installments, _payments(400), clock)) == 266.66
    assert next_payment_suggestion(evaluate_schedule(installments, _payments(1000), clock)) == 0
    assert next_payment_suggestion([]) == 0


def test_clock_is_read_once_per_evaluation():
    class CountingClock:
        calls = 0

        def today(self):
            CountingClock.calls += 1
            return TODAY

    evaluate_schedule(_installments(count=5), _payments(10), CountingClock())
    assert CountingClock.calls == 1


def test_compare_schedule_reports_difference_with_even_split():
    result = compare_schedule(1000, [500, 400])

    assert result['suggested'] == [500.0, 500.0]
    assert result['scheduled'] == 900.0
    assert result['diff'] == -100.0
    assert [row['delta'] for row in result['rows']] == [0.0, -100.0]


def test_compare_schedule_with_blank_amounts():
    result = compare_schedule(90, ['', None, '30'])
    assert result['count'] == 3
    assert result['suggested'] == [30.0, 30.0, 30.0]
    assert result['diff'] == -60.0
