"""Service layer holding the current expense/category snapshot."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional, Tuple

from .data_processing import count_category_usage
from .errors import CategoryInUseError, ValidationError
from .models import Category, Expense, ExpenseFields

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """Immutable view of the backend's categories and expenses.

    Mutations never touch an existing snapshot; they produce a new one.
    """

    categories: Tuple[Category, ...] = ()
    expenses: Tuple[Expense, ...] = ()
    loaded_at: Optional[datetime] = field(default=None, compare=False)

    def find_category(self, category_id: str) -> Optional[Category]:
        return next((c for c in self.categories if c.id == category_id), None)

    def find_expense(self, expense_id: str) -> Optional[Expense]:
        return next((e for e in self.expenses if e.id == expense_id), None)


class ExpenseTrackerService:
    """CRUD operations for categories and expenses.

    Each successful call goes through the REST client first and then
    replaces :attr:`snapshot` with an updated copy, so a page can render
    from the snapshot without refetching everything.

    Args:
        client: An :class:`~expense_dashboard.api_client.ExpenseApiClient`
            or any object exposing the same methods.
    """

    def __init__(self, client, snapshot: Optional[Snapshot] = None):
        self.client = client
        self.snapshot = snapshot or Snapshot()

    def refresh(self) -> Snapshot:
        """Fetch categories and expenses from the backend."""
        categories = tuple(self.client.list_categories())
        expenses = tuple(self.client.list_expenses())
        self.snapshot = Snapshot(categories=categories, expenses=expenses, loaded_at=datetime.now())
        logger.info("Loaded %d categories and %d expenses", len(categories), len(expenses))
        return self.snapshot

    # -- categories ---------------------------------------------------------

    def create_category(self, name: str) -> Category:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name is required")
        created = self.client.create_category(name)
        self.snapshot = replace(self.snapshot, categories=(created,) + self.snapshot.categories)
        logger.info("Created category %s (%s)", created.id, created.name)
        return created

    def rename_category(self, category_id: str, name: str) -> Category:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name is required")
        updated = self.client.update_category(category_id, name)
        self.snapshot = replace(
            self.snapshot,
            categories=tuple(updated if c.id == updated.id else c for c in self.snapshot.categories),
        )
        logger.info("Renamed category %s to %s", updated.id, updated.name)
        return updated

    def delete_category(self, category_id: str) -> None:
        """Delete a category that no expense references.

        Raises:
            CategoryInUseError: If expenses in the snapshot still point at it.
        """
        in_use = count_category_usage(self.snapshot.expenses, category_id)
        if in_use:
            raise CategoryInUseError(category_id, in_use)
        self.client.delete_category(category_id)
        self.snapshot = replace(
            self.snapshot,
            categories=tuple(c for c in self.snapshot.categories if c.id != category_id),
        )
        logger.info("Deleted category %s", category_id)

    # -- expenses -----------------------------------------------------------

    def create_expense(self, fields: ExpenseFields) -> Expense:
        fields.validate()
        created = self.client.create_expense(fields)
        self.snapshot = replace(self.snapshot, expenses=(created,) + self.snapshot.expenses)
        logger.info("Created expense %s (%s)", created.id, created.name)
        return created

    def update_expense(self, expense_id: str, fields: ExpenseFields) -> Expense:
        fields.validate()
        updated = self.client.update_expense(expense_id, fields)
        self.snapshot = replace(
            self.snapshot,
            expenses=tuple(updated if e.id == updated.id else e for e in self.snapshot.expenses),
        )
        logger.info("Updated expense %s", updated.id)
        return updated

    def delete_expense(self, expense_id: str) -> None:
        self.client.delete_expense(expense_id)
        self.snapshot = replace(
            self.snapshot,
            expenses=tuple(e for e in self.snapshot.expenses if e.id != expense_id),
        )
        logger.info("Deleted expense %s", expense_id)
