"""Shared sidebar components for the multi-page dashboard.

This module provides the pieces every page needs: the service bound to the
REST backend, the loaded snapshot, the sidebar with a refresh control, and
the dismissible flash message used to surface backend errors.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import streamlit as st

from . import config
from .api_client import ExpenseApiClient
from .errors import ApiError
from .logger import setup_logging
from .persistent_cache import load_cache as load_persistent_cache, save_cache as save_persistent_cache
from .services import ExpenseTrackerService, Snapshot

logger = logging.getLogger(__name__)

_SERVICE_KEY = '_expense_service'
_FLASH_KEY = '_flash_message'
_CACHE_KEY = '_persistent_cache_store'


def get_service() -> ExpenseTrackerService:
    """Return the session's service, creating it on first use."""
    service = st.session_state.get(_SERVICE_KEY)
    if service is None:
        setup_logging()
        service = ExpenseTrackerService(ExpenseApiClient())
        st.session_state[_SERVICE_KEY] = service
    return service


def render_shared_sidebar() -> Dict[str, Any]:
    """Render shared sidebar elements and load data for the page.

    Returns:
        Dict with keys: 'service', 'snapshot', 'error'.  ``snapshot`` is
        ``None`` when the initial load failed; ``error`` then holds the
        message.
    """
    service = get_service()

    st.sidebar.title("💸 Expense Tracker")
    st.sidebar.caption(f"Backend: {config.API_URL}")

    force = st.sidebar.button("🔄 Reload data", use_container_width=True)
    snapshot, error = _load_snapshot(service, force=force)

    if snapshot is not None:
        col1, col2 = st.sidebar.columns(2)
        col1.metric("Expenses", f"{len(snapshot.expenses):,}")
        col2.metric("Categories", f"{len(snapshot.categories):,}")
        if snapshot.loaded_at:
            st.sidebar.caption(f"Loaded at {snapshot.loaded_at:%H:%M:%S}")

    return {
        'service': service,
        'snapshot': snapshot,
        'error': error,
    }


def _load_snapshot(service: ExpenseTrackerService, force: bool = False) -> tuple[Optional[Snapshot], Optional[str]]:
    if service.snapshot.loaded_at is not None and not force:
        return service.snapshot, None
    try:
        return service.refresh(), None
    except ApiError as exc:
        logger.error("Loading data failed: %s", exc.message)
        return None, exc.message


# ---------------------------------------------------------------------------
# Flash messages
# ---------------------------------------------------------------------------


def flash(message: str, level: str = 'error') -> None:
    """Queue a message that stays visible until dismissed."""
    st.session_state[_FLASH_KEY] = {'level': level, 'message': message}


def flash_api_error(exc: ApiError, action: str) -> None:
    logger.warning("%s failed: %s", action, exc.message)
    flash(exc.message or f"{action} failed")


def render_flash() -> None:
    """Show the queued flash message with a dismiss button."""
    entry = st.session_state.get(_FLASH_KEY)
    if not entry:
        return
    render = getattr(st, entry.get('level', 'error'), st.error)
    col1, col2 = st.columns([10, 1])
    with col1:
        render(entry['message'])
    with col2:
        if st.button("✖", key="dismiss_flash", help="Dismiss"):
            st.session_state.pop(_FLASH_KEY, None)
            st.rerun()


# ---------------------------------------------------------------------------
# Persistent cache
# ---------------------------------------------------------------------------


def get_persistent_cache() -> Dict[str, Any]:
    cache = st.session_state.get(_CACHE_KEY)
    if cache is None:
        cache = load_persistent_cache()
        st.session_state[_CACHE_KEY] = cache
    if not isinstance(cache.get('filters'), dict):
        cache['filters'] = {}
    return cache


def persist_cache(cache: Dict[str, Any]) -> None:
    try:  # pragma: no cover - disk IO
        save_persistent_cache(cache)
    except OSError as exc:
        logger.warning("Could not save dashboard cache: %s", exc)
