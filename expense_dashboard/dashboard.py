"""Dashboard page of the expense tracker.

Shows the category catalog, the filter controls, a stacked bar chart of
spending per day and category, and the category totals table.  Everything
below the filters is recomputed from the loaded snapshot on every rerun.

To run the dashboard from the command line::

    streamlit run expense_dashboard/Home.py
"""

from __future__ import annotations

from typing import Dict, List, Sequence

import pandas as pd
import streamlit as st

from . import data_processing as dp
from . import visualization as viz
from .formatting import format_currency
from .models import Category
from .persistent_cache import deserialize_filter, serialize_filter
from .shared_sidebar import get_persistent_cache, persist_cache, render_flash, render_shared_sidebar

_CATEGORY_KEY = 'dashboard_category'
_START_KEY = 'dashboard_start_date'
_END_KEY = 'dashboard_end_date'


def main() -> None:
    """Entry point for the dashboard page."""
    st.set_page_config(page_title="Dashboard", page_icon="📊", layout="wide")

    sidebar_data = render_shared_sidebar()
    render_flash()

    snapshot = sidebar_data['snapshot']
    if snapshot is None:
        st.error(f"Error: {sidebar_data['error']}")
        return

    st.title("📊 Dashboard")

    categories = list(snapshot.categories)
    _render_category_list(categories)

    filter_spec = _render_filters(categories)

    filtered = dp.filter_expenses(snapshot.expenses, filter_spec)
    breakdown = dp.aggregate_by_category(filtered, categories)
    daily = dp.bucketize_by_day(filtered, categories)

    st.subheader("Totals by category")
    st.caption(f"{len(filtered)} expense(s) across {len(breakdown.rows)} categories")

    if breakdown.skipped:
        with st.expander(f"⚠️ {len(breakdown.skipped)} record(s) left out of totals"):
            for record in breakdown.skipped:
                st.write(f"• `{record.expense_id}`: {record.reason}")

    if not breakdown.rows:
        st.info("No expenses found.")
        return

    st.plotly_chart(viz.create_daily_stacked_bar_chart(daily), use_container_width=True)

    chart_type = st.radio("Breakdown chart", options=["Table", "Bar", "Pie"], horizontal=True)
    if chart_type == "Bar":
        st.plotly_chart(viz.create_category_bar_chart(breakdown), use_container_width=True)
    elif chart_type == "Pie":
        st.plotly_chart(viz.create_category_pie_chart(breakdown), use_container_width=True)

    st.table(totals_table(breakdown))


def totals_table(breakdown: dp.CategoryBreakdown) -> pd.DataFrame:
    """Category totals with a trailing grand total row, formatted for display."""
    rows = [
        {"Category": row.category_name, "Total": format_currency(row.total)}
        for row in breakdown.rows
    ]
    rows.append({"Category": "Grand Total", "Total": format_currency(breakdown.grand_total)})
    return pd.DataFrame(rows, columns=["Category", "Total"]).set_index("Category")


def category_options(categories: Sequence[Category]) -> List[str]:
    return [dp.ALL_CATEGORIES] + [category.id for category in categories]


def category_labels(categories: Sequence[Category]) -> Dict[str, str]:
    labels = {dp.ALL_CATEGORIES: "All"}
    labels.update({category.id: category.name for category in categories})
    return labels


def _render_category_list(categories: Sequence[Category]) -> None:
    with st.expander(f"Categories ({len(categories)})"):
        st.write(f"Total categories: {len(categories)}")
        for category in categories:
            st.markdown(f"- {category.name}")


def _reset_filters() -> None:
    st.session_state[_CATEGORY_KEY] = dp.ALL_CATEGORIES
    st.session_state[_START_KEY] = None
    st.session_state[_END_KEY] = None


def _init_filter_state(categories: Sequence[Category]) -> None:
    options = category_options(categories)
    if _CATEGORY_KEY not in st.session_state:
        cached = deserialize_filter(get_persistent_cache().get('filters'))
        st.session_state[_CATEGORY_KEY] = cached.category_id
        st.session_state[_START_KEY] = cached.start_date
        st.session_state[_END_KEY] = cached.end_date
    # A category deleted since the last visit falls back to "All"
    if st.session_state[_CATEGORY_KEY] not in options:
        st.session_state[_CATEGORY_KEY] = dp.ALL_CATEGORIES


def _render_filters(categories: Sequence[Category]) -> dp.FilterSpec:
    """Render the category and date controls and return the active filter."""
    _init_filter_state(categories)
    labels = category_labels(categories)

    st.subheader("Filters")
    col1, col2, col3, col4 = st.columns([3, 2, 2, 1], vertical_alignment="bottom")
    with col1:
        category_id = st.selectbox(
            "Category",
            options=category_options(categories),
            format_func=lambda value: labels.get(value, value),
            key=_CATEGORY_KEY,
        )
    with col2:
        start_date = st.date_input("From", format="DD/MM/YYYY", key=_START_KEY)
    with col3:
        end_date = st.date_input("To", format="DD/MM/YYYY", key=_END_KEY)
    with col4:
        st.button("Reset", on_click=_reset_filters, use_container_width=True)

    filter_spec = dp.FilterSpec(category_id=category_id, start_date=start_date, end_date=end_date)
    if filter_spec.start_date and filter_spec.end_date and filter_spec.start_date > filter_spec.end_date:
        st.warning("The start date is after the end date; nothing can match.")

    cache = get_persistent_cache()
    serialized = serialize_filter(filter_spec)
    if cache.get('filters') != serialized:
        cache['filters'] = serialized
        persist_cache(cache)
    return filter_spec
