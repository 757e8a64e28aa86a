import math

import pytest

from event_budget.budgets import split_even


def test_split_thousand_in_three():
    assert split_even(1000.00, 3) == [333.33, 333.33, 333.34]


def test_split_thousand_in_four_is_exact():
    assert split_even(1000.00, 4) == [250.00, 250.00, 250.00, 250.00]


def test_split_sum_matches_total():
    for total in [0, 0.01, 1, 99.99, 100, 250.5, 1000, 1234.56, 987654.32]:
        for count in range(1, 13):
            parts = split_even(total, count)
            assert len(parts) == count
            assert math.fsum(parts) == pytest.approx(total, abs=1e-9)


def test_only_last_installment_takes_the_remainder():
    for total, count in [(1000, 3), (100, 7), (250.5, 4), (99.99, 2)]:
        parts = split_even(total, count)
        base = math.floor(total / count * 100) / 100
        assert all(part == base for part in parts[:-1])
        assert parts[-1] == pytest.approx(total - base * (count - 1), abs=1e-9)


def test_cent_smaller_than_count_lands_on_last():
    assert split_even(0.01, 3) == [0.0, 0.0, 0.01]


def test_count_below_one_is_clamped():
    assert split_even(500, 0) == [500.0]
    assert split_even(500, -4) == [500.0]
    assert split_even(500, None) == [500.0]


def test_negative_or_blank_total_is_clamped_to_zero():
    assert split_even(-20, 2) == [0.0, 0.0]
    assert split_even('', 2) == [0.0, 0.0]


def test_string_total_is_parsed():
    assert split_even('300', 2) == [150.0, 150.0]
