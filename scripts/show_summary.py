#!/usr/bin/env python3
"""Print category totals and daily spending from the expense backend."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from expense_dashboard import data_processing as dp
from expense_dashboard.api_client import ExpenseApiClient
from expense_dashboard.errors import ApiError
from expense_dashboard.formatting import format_currency
from expense_dashboard.logger import setup_logging
from expense_dashboard.models import parse_date
from expense_dashboard.services import ExpenseTrackerService


def main(filter_spec: dp.FilterSpec, base_url: Optional[str] = None, show_daily: bool = False) -> int:
    service = ExpenseTrackerService(ExpenseApiClient(base_url=base_url))
    try:
        snapshot = service.refresh()
    except ApiError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1

    categories = list(snapshot.categories)
    filtered = dp.filter_expenses(snapshot.expenses, filter_spec)
    breakdown = dp.aggregate_by_category(filtered, categories)

    if not breakdown.rows:
        print("No expenses found.")
        return 0

    print(f"Expenses matched: {len(filtered)}")
    print("\nTotals by category:")
    print(dp.totals_frame(breakdown).to_string(index=False))
    print(f"\nGrand Total: {format_currency(breakdown.grand_total)}")

    if breakdown.skipped:
        print(f"\nSkipped {len(breakdown.skipped)} record(s):")
        for record in breakdown.skipped:
            print(f"  {record.expense_id}: {record.reason}")

    if show_daily:
        daily = dp.bucketize_by_day(filtered, categories)
        print("\nDaily spending:")
        print(dp.series_frame(daily).to_string())
    return 0


def _date_arg(text: str):
    parsed = parse_date(text)
    if parsed is None:
        raise argparse.ArgumentTypeError(f"invalid date: {text!r} (use YYYY-MM-DD)")
    return parsed


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Show expense totals by category.')
    parser.add_argument('--category', default=dp.ALL_CATEGORIES, help='Category id to restrict to (default: all)')
    parser.add_argument('--start', type=_date_arg, help='First day to include (YYYY-MM-DD)')
    parser.add_argument('--end', type=_date_arg, help='Last day to include (YYYY-MM-DD)')
    parser.add_argument('--api-url', help='Backend URL (default: EXPENSE_API_URL)')
    parser.add_argument('--daily', action='store_true', help='Also print the day by category matrix')
    parser.add_argument('--log-level', default='WARNING', help='Log level for console output')
    return parser.parse_args(argv)


if __name__ == '__main__':
    args = _parse_args()
    setup_logging(level=args.log_level.upper())
    spec = dp.FilterSpec(category_id=args.category, start_date=args.start, end_date=args.end)
    sys.exit(main(spec, base_url=args.api_url, show_daily=args.daily))
