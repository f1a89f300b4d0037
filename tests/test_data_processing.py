"""Unit tests for expense_dashboard.data_processing.

These tests exercise the filter, aggregation and bucketing functions on
small, controlled inputs.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from expense_dashboard import data_processing as dp
from expense_dashboard.models import Category, CategoryRef, Expense

CATEGORIES = [Category(id='A', name='Food'), Category(id='B', name='Travel')]


def _expense(expense_id, category, amount, day, name=None):
    ref = category if isinstance(category, CategoryRef) else CategoryRef(id=category)
    return Expense(
        id=expense_id,
        name=name or expense_id,
        amount=Decimal(str(amount)) if amount is not None else None,
        date=date.fromisoformat(day) if day else None,
        category=ref,
    )


def _scenario():
    return [
        _expense('e1', 'A', 100, '2024-01-01'),
        _expense('e2', 'B', 50, '2024-01-01'),
        _expense('e3', 'A', 25, '2024-01-02'),
    ]


def test_identity_filter_returns_input_unchanged() -> None:
    expenses = _scenario()
    result = dp.filter_expenses(expenses, dp.FilterSpec())
    assert result == expenses
    assert result is not expenses


def test_filter_by_category_keeps_order() -> None:
    expenses = _scenario()
    result = dp.filter_expenses(expenses, dp.FilterSpec(category_id='A'))
    assert [e.id for e in result] == ['e1', 'e3']


def test_filter_by_start_date() -> None:
    result = dp.filter_expenses(_scenario(), dp.FilterSpec(start_date=date(2024, 1, 2)))
    assert [e.id for e in result] == ['e3']


def test_end_date_is_inclusive_for_the_whole_day() -> None:
    expenses = [
        _expense('same-day', 'A', 10, '2024-01-31'),
        _expense('next-day', 'A', 10, '2024-02-01'),
    ]
    result = dp.filter_expenses(expenses, dp.FilterSpec(end_date=date(2024, 1, 31)))
    assert [e.id for e in result] == ['same-day']


def test_filter_is_a_subsequence() -> None:
    expenses = _scenario() + [_expense('e4', 'B', 5, '2024-01-03')]
    result = dp.filter_expenses(
        expenses,
        dp.FilterSpec(category_id='B', start_date=date(2024, 1, 1), end_date=date(2024, 1, 3)),
    )
    positions = [expenses.index(e) for e in result]
    assert positions == sorted(positions)
    assert len(set(positions)) == len(positions)


def test_date_bounds_drop_undated_expenses() -> None:
    expenses = [_expense('dated', 'A', 1, '2024-01-05'), _expense('undated', 'A', 1, None)]
    assert [e.id for e in dp.filter_expenses(expenses, dp.FilterSpec())] == ['dated', 'undated']
    bounded = dp.filter_expenses(expenses, dp.FilterSpec(start_date=date(2024, 1, 1)))
    assert [e.id for e in bounded] == ['dated']


def test_inverted_range_matches_nothing() -> None:
    spec = dp.FilterSpec(start_date=date(2024, 1, 2), end_date=date(2024, 1, 1))
    assert dp.filter_expenses(_scenario(), spec) == []


def test_aggregate_scenario() -> None:
    breakdown = dp.aggregate_by_category(_scenario(), CATEGORIES)
    assert [(r.category_id, r.category_name, r.total) for r in breakdown.rows] == [
        ('A', 'Food', Decimal('125')),
        ('B', 'Travel', Decimal('50')),
    ]
    assert breakdown.grand_total == Decimal('175')
    assert breakdown.skipped == []


def test_aggregate_after_category_filter() -> None:
    filtered = dp.filter_expenses(_scenario(), dp.FilterSpec(category_id='A'))
    breakdown = dp.aggregate_by_category(filtered, CATEGORIES)
    assert [(r.category_id, r.total) for r in breakdown.rows] == [('A', Decimal('125'))]
    assert breakdown.grand_total == Decimal('125')


def test_aggregate_after_start_date_filter() -> None:
    filtered = dp.filter_expenses(_scenario(), dp.FilterSpec(start_date=date(2024, 1, 2)))
    breakdown = dp.aggregate_by_category(filtered, CATEGORIES)
    assert [(r.category_id, r.total) for r in breakdown.rows] == [('A', Decimal('25'))]


def test_unknown_category_is_grouped_not_dropped() -> None:
    expenses = [
        _expense('e1', 'missing', 10, '2024-01-01'),
        _expense('e2', CategoryRef(id=None), 5, '2024-01-01'),
        _expense('e3', 'A', 1, '2024-01-01'),
    ]
    breakdown = dp.aggregate_by_category(expenses, CATEGORIES)
    totals = {r.category_id: (r.category_name, r.total) for r in breakdown.rows}
    assert totals['Unknown'] == ('Unknown', Decimal('15'))
    assert totals['A'] == ('Food', Decimal('1'))
    assert breakdown.grand_total == Decimal('16')


def test_embedded_category_name_is_used_directly() -> None:
    expenses = [_expense('e1', CategoryRef(id='Z', name='Gifts'), 20, '2024-01-01')]
    breakdown = dp.aggregate_by_category(expenses, CATEGORIES)
    assert [(r.category_id, r.category_name) for r in breakdown.rows] == [('Z', 'Gifts')]


def test_decimal_sum_has_no_float_drift() -> None:
    expenses = [_expense(f'e{i}', 'A', '0.1', '2024-01-01') for i in range(3)]
    breakdown = dp.aggregate_by_category(expenses, CATEGORIES)
    assert breakdown.grand_total == Decimal('0.3')


def test_invalid_records_are_skipped_and_reported() -> None:
    bad_amount = Expense(
        id='bad-amount', name='x', amount=None, date=date(2024, 1, 1),
        category=CategoryRef(id='A'), issues=("invalid amount 'abc'",),
    )
    bad_date = _expense('bad-date', 'A', 3, None)
    expenses = _scenario() + [bad_amount, bad_date]

    breakdown = dp.aggregate_by_category(expenses, CATEGORIES)
    daily = dp.bucketize_by_day(expenses, CATEGORIES)

    assert breakdown.grand_total == Decimal('175')
    assert [s.expense_id for s in breakdown.skipped] == ['bad-amount', 'bad-date']
    assert breakdown.skipped[0].reason == "invalid amount 'abc'"
    assert [s.expense_id for s in daily.skipped] == ['bad-amount', 'bad-date']


def test_grand_total_matches_direct_sum() -> None:
    expenses = _scenario() + [_expense('e4', 'missing', '12.34', '2024-01-05')]
    breakdown = dp.aggregate_by_category(expenses, CATEGORIES)
    assert sum((r.total for r in breakdown.rows), Decimal('0')) == breakdown.grand_total
    assert breakdown.grand_total == sum((e.amount for e in expenses), Decimal('0'))


def test_bucketize_scenario() -> None:
    daily = dp.bucketize_by_day(_scenario(), CATEGORIES)
    assert daily.day_labels == ['2024-01-01', '2024-01-02']
    series = {s.category_id: s.values for s in daily.series}
    assert series['A'] == [Decimal('100'), Decimal('25')]
    assert series['B'] == [Decimal('50'), Decimal('0')]
    assert [s.category_name for s in daily.series] == ['Food', 'Travel']


def test_bucketize_sorts_days_and_sums_same_cell() -> None:
    expenses = [
        _expense('e1', 'B', 1, '2024-03-10'),
        _expense('e2', 'B', 2, '2024-01-05'),
        _expense('e3', 'B', 3, '2024-03-10'),
    ]
    daily = dp.bucketize_by_day(expenses, CATEGORIES)
    assert daily.day_labels == ['2024-01-05', '2024-03-10']
    assert daily.series[0].values == [Decimal('2'), Decimal('4')]


def test_series_sums_match_category_totals() -> None:
    expenses = _scenario() + [
        _expense('e4', 'missing', 7, '2024-01-03'),
        _expense('e5', 'B', '2.5', '2024-01-02'),
    ]
    breakdown = dp.aggregate_by_category(expenses, CATEGORIES)
    daily = dp.bucketize_by_day(expenses, CATEGORIES)
    totals = {r.category_id: r.total for r in breakdown.rows}
    assert {s.category_id: s.total for s in daily.series} == totals


def test_empty_input() -> None:
    breakdown = dp.aggregate_by_category([], CATEGORIES)
    daily = dp.bucketize_by_day([], CATEGORIES)
    assert breakdown.rows == [] and breakdown.grand_total == Decimal('0')
    assert daily.day_labels == [] and daily.series == []
    assert dp.series_frame(daily).empty


def test_count_category_usage() -> None:
    assert dp.count_category_usage(_scenario(), 'A') == 2
    assert dp.count_category_usage(_scenario(), 'C') == 0


def test_frames() -> None:
    expenses = _scenario()
    table = dp.expenses_frame(expenses, CATEGORIES)
    assert list(table['Category']) == ['Food', 'Travel', 'Food']
    assert list(table['Amount']) == [100.0, 50.0, 25.0]

    totals = dp.totals_frame(dp.aggregate_by_category(expenses, CATEGORIES))
    assert list(totals.columns) == ['Category', 'Total']

    matrix = dp.series_frame(dp.bucketize_by_day(expenses, CATEGORIES))
    assert list(matrix.index) == ['2024-01-01', '2024-01-02']
    assert matrix.loc['2024-01-02', 'Travel'] == 0.0


def test_free_text_dates_are_skipped_by_aggregation() -> None:
    vague = Expense.from_api({'_id': 'vague', 'name': 'x', 'amount': 40, 'date': 'today', 'category': 'A'})
    breakdown = dp.aggregate_by_category(_scenario() + [vague], CATEGORIES)
    assert breakdown.grand_total == Decimal('175')
    assert [s.expense_id for s in breakdown.skipped] == ['vague']


def test_filter_by_category_with_embedded_reference() -> None:
    expenses = [
        Expense.from_api({'_id': 'e1', 'name': 'a', 'amount': 3, 'date': '2024-01-01',
                          'category': {'_id': 'A', 'name': 'Food'}}),
        Expense.from_api({'_id': 'e2', 'name': 'b', 'amount': 4, 'date': '2024-01-01', 'category': 'B'}),
        Expense.from_api({'_id': 'e3', 'name': 'c', 'amount': 5, 'date': '2024-01-02', 'category': 'A'}),
    ]
    result = dp.filter_expenses(expenses, dp.FilterSpec(category_id='A'))
    assert [e.id for e in result] == ['e1', 'e3']
    breakdown = dp.aggregate_by_category(result, CATEGORIES)
    assert [(r.category_id, r.category_name, r.total) for r in breakdown.rows] == [('A', 'Food', Decimal('8'))]


def test_end_date_boundary_for_timestamped_records() -> None:
    expenses = [
        Expense.from_api({'_id': 'late', 'name': 'a', 'amount': 1, 'date': '2024-01-31T23:59:59.999Z', 'category': 'A'}),
        Expense.from_api({'_id': 'after', 'name': 'b', 'amount': 1, 'date': '2024-02-01T00:00:00.000Z', 'category': 'A'}),
    ]
    result = dp.filter_expenses(expenses, dp.FilterSpec(end_date=date(2024, 1, 31)))
    assert [e.id for e in result] == ['late']


def test_name_only_categories_are_not_merged() -> None:
    expenses = [
        _expense('e1', CategoryRef(id=None, name='Gifts'), 2, '2024-01-01'),
        _expense('e2', CategoryRef(id=None, name='Books'), 3, '2024-01-01'),
        _expense('e3', CategoryRef(id=None, name='Food'), 4, '2024-01-01'),
    ]
    breakdown = dp.aggregate_by_category(expenses, CATEGORIES)
    assert [(r.category_id, r.category_name, r.total) for r in breakdown.rows] == [
        ('Gifts', 'Gifts', Decimal('2')),
        ('Books', 'Books', Decimal('3')),
        ('A', 'Food', Decimal('4')),
    ]
