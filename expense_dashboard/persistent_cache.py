"""Lightweight persistent cache for the dashboard filter selection."""

from __future__ import annotations

import copy
import json
from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional

from . import config
from .data_processing import ALL_CATEGORIES, FilterSpec
from .models import parse_date

DEFAULT_CACHE: Dict[str, Any] = {
    'filters': {},
}


def load_cache(path: Path | None = None) -> Dict[str, Any]:
    target = path or config.CACHE_PATH
    if not target.exists():
        return copy.deepcopy(DEFAULT_CACHE)
    try:
        with target.open('r', encoding='utf-8') as handle:
            data = json.load(handle)
    except (json.JSONDecodeError, OSError):
        return copy.deepcopy(DEFAULT_CACHE)
    if not isinstance(data, dict):
        return copy.deepcopy(DEFAULT_CACHE)
    merged = copy.deepcopy(DEFAULT_CACHE)
    merged.update({k: v for k, v in data.items() if k in DEFAULT_CACHE})
    return merged


def save_cache(cache: Dict[str, Any], path: Path | None = None) -> None:
    target = path or config.CACHE_PATH
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open('w', encoding='utf-8') as handle:
        json.dump(cache, handle, indent=2, sort_keys=True)


def serialize_filter(filter_spec: FilterSpec) -> Dict[str, Any]:
    return {
        'category_id': filter_spec.category_id,
        'start_date': _iso_date(filter_spec.start_date),
        'end_date': _iso_date(filter_spec.end_date),
    }


def deserialize_filter(raw: Any) -> FilterSpec:
    """Rebuild a FilterSpec from cached JSON, ignoring anything malformed."""
    if not isinstance(raw, dict):
        return FilterSpec()
    category_id = raw.get('category_id')
    return FilterSpec(
        category_id=category_id if isinstance(category_id, str) and category_id else ALL_CATEGORIES,
        start_date=parse_date(raw.get('start_date')),
        end_date=parse_date(raw.get('end_date')),
    )


def _iso_date(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None
