"""Domain models for categories and expenses.

The backend may return an expense's category either as a bare identifier
or as an embedded category object.  Both shapes are folded into a single
:class:`CategoryRef` when a record is parsed, so nothing downstream has to
inspect the raw payload again.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from .errors import ValidationError

UNKNOWN = "Unknown"
_ISO_DAY = re.compile(r"^\d{4}-\d{2}-\d{2}(?:[T ].*)?$")


@dataclass(frozen=True)
class Category:
    """A named grouping for expenses."""

    id: str
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "Category":
        """Build a Category from the backend's ``{_id, name, ...}`` JSON."""
        category_id = payload.get("_id") or payload.get("id")
        if not category_id:
            raise ValueError("category payload has no identifier")
        return cls(
            id=str(category_id),
            name=str(payload.get("name") or ""),
            created_at=parse_timestamp(payload.get("createdAt")),
            updated_at=parse_timestamp(payload.get("updatedAt")),
        )


@dataclass(frozen=True)
class CategoryRef:
    """Canonical category reference carried by every expense.

    ``name`` is only set when the backend embedded the category object;
    bare identifiers are resolved against the catalog at read time.
    """

    id: Optional[str]
    name: Optional[str] = None

    @classmethod
    def from_api(cls, value: Any) -> "CategoryRef":
        if isinstance(value, Mapping):
            ref_id = value.get("_id") or value.get("id")
            name = value.get("name")
            return cls(
                id=str(ref_id) if ref_id else None,
                name=str(name) if name else None,
            )
        if isinstance(value, str) and value.strip():
            return cls(id=value.strip())
        return cls(id=None)

    def resolve(self, catalog: Mapping[str, Category]) -> Tuple[str, str]:
        """Return the ``(group key, display name)`` for this reference.

        An embedded name wins; otherwise the catalog is consulted.  A
        name-only reference is matched to the catalog by name and otherwise
        groups under that name.  Anything else groups under ``"Unknown"``.
        """
        if self.id and self.name:
            return self.id, self.name
        if self.id and self.id in catalog:
            return self.id, catalog[self.id].name
        if self.name:
            for category in catalog.values():
                if category.name == self.name:
                    return category.id, category.name
            return self.name, self.name
        return UNKNOWN, UNKNOWN


@dataclass(frozen=True)
class Expense:
    """A dated, amount-bearing record attributed to one category.

    ``amount`` and ``date`` are ``None`` when the backend sent something
    that could not be parsed; ``issues`` says why.
    """

    id: str
    name: str
    amount: Optional[Decimal]
    date: Optional[date]
    category: CategoryRef
    description: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    issues: Tuple[str, ...] = field(default=(), compare=False)

    @property
    def is_valid(self) -> bool:
        return self.amount is not None and self.amount.is_finite() and self.date is not None

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "Expense":
        expense_id = payload.get("_id") or payload.get("id")
        if not expense_id:
            raise ValueError("expense payload has no identifier")

        issues: List[str] = []
        raw_amount = payload.get("amount")
        amount = parse_amount(raw_amount)
        if amount is None:
            issues.append(f"invalid amount {raw_amount!r}")
        raw_date = payload.get("date")
        expense_date = parse_date(raw_date)
        if expense_date is None:
            issues.append(f"invalid date {raw_date!r}")

        return cls(
            id=str(expense_id),
            name=str(payload.get("name") or ""),
            amount=amount,
            date=expense_date,
            category=CategoryRef.from_api(payload.get("category")),
            description=str(payload.get("description") or ""),
            created_at=parse_timestamp(payload.get("createdAt")),
            updated_at=parse_timestamp(payload.get("updatedAt")),
            issues=tuple(issues),
        )


@dataclass
class ExpenseFields:
    """User-editable expense fields as entered in a form."""

    name: str
    amount: Any
    date: Optional[date]
    category_id: Optional[str]
    description: str = ""

    def validate(self) -> Decimal:
        """Check the fields and return the parsed amount.

        Raises:
            ValidationError: If a required field is missing or the amount
                is not a finite, non-negative number.
        """
        amount = parse_amount(self.amount)
        if not (self.name or "").strip() or self.amount in (None, "") or not self.date or not self.category_id:
            raise ValidationError("Please fill name, amount, date, and category.")
        if amount is None:
            raise ValidationError("Amount must be a number")
        if amount < 0:
            raise ValidationError("Amount cannot be negative")
        return amount

    def to_payload(self) -> Dict[str, Any]:
        amount = self.validate()
        return {
            "name": self.name.strip(),
            "description": self.description or "",
            "amount": float(amount),
            "date": self.date.isoformat(),
            "category": self.category_id,
        }

    @classmethod
    def from_expense(cls, expense: Expense) -> "ExpenseFields":
        return cls(
            name=expense.name,
            amount=expense.amount,
            date=expense.date,
            category_id=expense.category.id,
            description=expense.description,
        )


def parse_amount(value: Any) -> Optional[Decimal]:
    """Parse an amount into a finite Decimal, or ``None``."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        amount = value
    else:
        # str() first so float payloads keep their shortest repr
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return None
    return amount if amount.is_finite() else None


def parse_date(value: Any) -> Optional[date]:
    """Parse a calendar date from ``YYYY-MM-DD`` or an ISO timestamp.

    Timestamps carrying an offset are converted to UTC before being
    truncated to their calendar day.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return _utc_day(pd.Timestamp(value))
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    # Reduced-precision ISO forms and free text ("2024", "today") are not dates
    if not _ISO_DAY.match(text):
        return None
    try:
        parsed = pd.to_datetime(text, format="ISO8601")
    except (ValueError, TypeError):
        return None
    if pd.isna(parsed):
        return None
    return _utc_day(parsed)


def parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = pd.to_datetime(value, format="ISO8601")
    except (ValueError, TypeError):
        return None
    return None if pd.isna(parsed) else parsed.to_pydatetime()


def category_index(categories: Iterable[Category]) -> Dict[str, Category]:
    """Map category id to category."""
    return {category.id: category for category in categories}


def _utc_day(timestamp: pd.Timestamp) -> date:
    if timestamp.tzinfo is not None:
        timestamp = timestamp.tz_convert("UTC")
    return timestamp.date()
