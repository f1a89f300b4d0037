"""Plotly visualisation helpers for the expense dashboard.

This module defines functions that accept the result objects returned by
:mod:`data_processing` and produce interactive Plotly figures.  Each
function is focused on a specific chart type; Streamlit renders them via
``st.plotly_chart``.
"""

from __future__ import annotations

import plotly.express as px
import plotly.graph_objects as go

from . import config
from .data_processing import CategoryBreakdown, DailySeries, totals_frame
from .formatting import format_day_label

PALETTE = [
    "#4e79a7",
    "#59a14f",
    "#e15759",
    "#f28e2b",
    "#76b7b2",
    "#edc949",
    "#b07aa1",
    "#ff9da7",
    "#9c755f",
    "#bab0ab",
]


def _empty_figure() -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title="No data to display")
    return fig


def create_daily_stacked_bar_chart(daily: DailySeries, title: str | None = None) -> go.Figure:
    """Generate a stacked bar chart of spending per day and category.

    Parameters
    ----------
    daily : DailySeries
        Output of :func:`data_processing.bucketize_by_day`.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        One bar trace per category, stacked on a shared date axis.
    """
    if not daily.day_labels:
        return _empty_figure()
    fig = go.Figure()
    for idx, item in enumerate(daily.series):
        fig.add_trace(
            go.Bar(
                name=item.category_name,
                x=daily.day_labels,
                y=[float(value) for value in item.values],
                marker_color=PALETTE[idx % len(PALETTE)],
            )
        )
    fig.update_layout(
        barmode="stack",
        title=title,
        hovermode="x unified",
        legend={"orientation": "h", "yanchor": "bottom", "y": 1.02},
        xaxis_title="Date",
        yaxis_title=f"Amount ({config.CURRENCY_CODE})",
    )
    fig.update_xaxes(
        type="category",
        tickmode="array",
        tickvals=daily.day_labels,
        ticktext=[format_day_label(label) for label in daily.day_labels],
    )
    return fig


def create_category_bar_chart(breakdown: CategoryBreakdown, title: str | None = None) -> go.Figure:
    """Generate a bar chart of total spending per category."""
    if not breakdown.rows:
        return _empty_figure()
    df = totals_frame(breakdown)
    fig = px.bar(df, x="Category", y="Total", color="Category", color_discrete_sequence=PALETTE)
    fig.update_layout(
        title=title or "Spending by category",
        xaxis_title="Category",
        yaxis_title=f"Total ({config.CURRENCY_CODE})",
        showlegend=False,
    )
    return fig


def create_category_pie_chart(breakdown: CategoryBreakdown, title: str | None = None) -> go.Figure:
    """Generate a pie chart showing each category's share of spending."""
    if not breakdown.rows:
        return _empty_figure()
    df = totals_frame(breakdown)
    fig = px.pie(df, names="Category", values="Total", color_discrete_sequence=PALETTE)
    fig.update_layout(title=title or "Category breakdown")
    return fig
