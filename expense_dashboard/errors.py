"""Exception hierarchy shared by the REST client and the service layer."""

from __future__ import annotations

from typing import Optional


class ApiError(Exception):
    """Base class for failures talking to the expense backend."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NetworkError(ApiError):
    """The backend could not be reached or did not answer in time."""


class ServerError(ApiError):
    """The backend answered with a failure or an unexpected body."""


class ValidationError(ApiError):
    """The submitted data was rejected, locally or by the backend."""


class NotFoundError(ApiError):
    """The addressed category or expense does not exist."""


class CategoryInUseError(ValidationError):
    """A category cannot be deleted while expenses still reference it."""

    def __init__(self, category_id: str, expense_count: int):
        super().__init__(
            f"Category is used by {expense_count} expense(s); reassign or delete them first."
        )
        self.category_id = category_id
        self.expense_count = expense_count
