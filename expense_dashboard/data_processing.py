"""Filtering and aggregation helpers for expense snapshots.

This module contains pure functions that turn a list of expenses into
filtered subsets, per-category totals and a day by category matrix for
charting.  They never mutate their inputs and never perform I/O, so they
can be unit tested and reused outside the Streamlit pages (for example by
``scripts/show_summary.py``).

Sums are computed with :class:`decimal.Decimal` so totals shown at two
decimal places never drift.  Records with an unusable amount or date are
left out of totals and reported as :class:`SkippedRecord` entries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from .models import Category, Expense, category_index

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "all"
ZERO = Decimal("0")

# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FilterSpec:
    """Active category and date-range constraint."""

    category_id: str = ALL_CATEGORIES
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @property
    def is_identity(self) -> bool:
        return self.category_id == ALL_CATEGORIES and self.start_date is None and self.end_date is None


@dataclass(frozen=True)
class SkippedRecord:
    expense_id: str
    reason: str


@dataclass(frozen=True)
class CategoryTotal:
    category_id: str
    category_name: str
    total: Decimal


@dataclass(frozen=True)
class CategoryBreakdown:
    rows: List[CategoryTotal]
    grand_total: Decimal
    skipped: List[SkippedRecord] = field(default_factory=list)


@dataclass(frozen=True)
class CategorySeries:
    category_id: str
    category_name: str
    values: List[Decimal]

    @property
    def total(self) -> Decimal:
        return sum(self.values, ZERO)


@dataclass(frozen=True)
class DailySeries:
    day_labels: List[str]
    series: List[CategorySeries]
    skipped: List[SkippedRecord] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Filter engine
# ---------------------------------------------------------------------------


def filter_expenses(expenses: Sequence[Expense], filter_spec: FilterSpec) -> List[Expense]:
    """Return the expenses matching ``filter_spec`` in their original order.

    The end bound is inclusive for the whole calendar day.  Expenses
    without a valid date cannot satisfy a date bound and are dropped
    whenever one is set.
    """
    start, end = filter_spec.start_date, filter_spec.end_date
    selected = filter_spec.category_id
    filtered: List[Expense] = []
    for expense in expenses:
        if selected != ALL_CATEGORIES and expense.category.id != selected:
            continue
        if start is not None or end is not None:
            if expense.date is None:
                continue
            if start is not None and expense.date < start:
                continue
            if end is not None and expense.date > end:
                continue
        filtered.append(expense)
    return filtered


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def aggregate_by_category(
    expenses: Iterable[Expense],
    categories: Iterable[Category] = (),
) -> CategoryBreakdown:
    """Group expenses by resolved category and sum their amounts.

    Rows come out in order of first appearance.  The grand total is the
    sum of the row totals, which is also the sum of every included amount.
    """
    catalog = category_index(categories)
    totals: Dict[str, Decimal] = {}
    names: Dict[str, str] = {}
    valid, skipped = _partition_valid(expenses)

    for expense in valid:
        key, name = expense.category.resolve(catalog)
        if key not in totals:
            totals[key] = ZERO
            names[key] = name
        totals[key] += expense.amount

    rows = [CategoryTotal(key, names[key], total) for key, total in totals.items()]
    grand_total = sum((row.total for row in rows), ZERO)
    return CategoryBreakdown(rows=rows, grand_total=grand_total, skipped=skipped)


# ---------------------------------------------------------------------------
# Time-series bucketing
# ---------------------------------------------------------------------------


def bucketize_by_day(
    expenses: Iterable[Expense],
    categories: Iterable[Category] = (),
) -> DailySeries:
    """Build a dense day by category matrix of summed amounts.

    Day labels are ``YYYY-MM-DD`` strings in ascending order.  Each
    category present in ``expenses`` gets one series aligned with the
    labels, with zero for days it has no spending on.
    """
    catalog = category_index(categories)
    cells: Dict[Tuple[str, str], Decimal] = {}
    names: Dict[str, str] = {}
    days = set()
    valid, skipped = _partition_valid(expenses)

    for expense in valid:
        key, name = expense.category.resolve(catalog)
        day = expense.date.isoformat()
        days.add(day)
        names.setdefault(key, name)
        cells[(day, key)] = cells.get((day, key), ZERO) + expense.amount

    day_labels = sorted(days)
    series = [
        CategorySeries(
            category_id=key,
            category_name=name,
            values=[cells.get((day, key), ZERO) for day in day_labels],
        )
        for key, name in names.items()
    ]
    return DailySeries(day_labels=day_labels, series=series, skipped=skipped)


def _partition_valid(expenses: Iterable[Expense]) -> Tuple[List[Expense], List[SkippedRecord]]:
    valid: List[Expense] = []
    skipped: List[SkippedRecord] = []
    for expense in expenses:
        if expense.is_valid:
            valid.append(expense)
            continue
        reason = "; ".join(expense.issues) or "invalid amount or date"
        logger.debug("Skipping expense %s: %s", expense.id, reason)
        skipped.append(SkippedRecord(expense.id, reason))
    return valid, skipped


def count_category_usage(expenses: Iterable[Expense], category_id: str) -> int:
    """Number of expenses whose reference points at ``category_id``."""
    return sum(1 for expense in expenses if expense.category.id == category_id)


# ---------------------------------------------------------------------------
# DataFrame views
# ---------------------------------------------------------------------------


def expenses_frame(expenses: Sequence[Expense], categories: Iterable[Category] = ()) -> pd.DataFrame:
    """Tabular view of expenses with the resolved category name."""
    catalog = category_index(categories)
    records = [
        {
            "id": expense.id,
            "Name": expense.name,
            "Description": expense.description,
            "Amount": float(expense.amount) if expense.amount is not None else None,
            "Date": expense.date,
            "Category": expense.category.resolve(catalog)[1],
        }
        for expense in expenses
    ]
    return pd.DataFrame(records, columns=["id", "Name", "Description", "Amount", "Date", "Category"])


def totals_frame(breakdown: CategoryBreakdown) -> pd.DataFrame:
    """Category totals as a DataFrame with ``Category`` and ``Total`` columns."""
    return pd.DataFrame(
        [{"Category": row.category_name, "Total": float(row.total)} for row in breakdown.rows],
        columns=["Category", "Total"],
    )


def series_frame(daily: DailySeries) -> pd.DataFrame:
    """Day by category matrix indexed by day label, one column per category."""
    data = {item.category_id: [float(value) for value in item.values] for item in daily.series}
    frame = pd.DataFrame(data, index=pd.Index(daily.day_labels, name="Day"))
    # Display names are not unique across ids
    frame.columns = [item.category_name for item in daily.series]
    return frame
