"""HTTP client for the expense tracker REST backend.

Wraps the backend's ``/categories`` and ``/expenses`` resources and turns
transport and status failures into the exceptions from :mod:`errors`.
Responses are parsed into :mod:`models` objects.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from . import config
from .errors import ApiError, NetworkError, NotFoundError, ServerError, ValidationError
from .models import Category, Expense, ExpenseFields

logger = logging.getLogger(__name__)

_VALIDATION_STATUSES = {400, 409, 422}


class ExpenseApiClient:
    """Synchronous client for the expense backend.

    Args:
        base_url: Backend root URL. Defaults to ``config.API_URL``.
        timeout: Per-request timeout in seconds. Defaults to ``config.API_TIMEOUT``.
        session: Optional ``requests.Session`` (or compatible object) for
            connection reuse and for injecting fakes in tests.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or config.API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else config.API_TIMEOUT
        self.session = session or requests.Session()

    # -- categories ---------------------------------------------------------

    def list_categories(self) -> List[Category]:
        data = self._request("GET", "/categories")
        return [_parse(Category, item) for item in _expect_list(data)]

    def create_category(self, name: str) -> Category:
        data = self._request("POST", "/categories", {"name": name})
        return _parse(Category, _expect_object(data))

    def update_category(self, category_id: str, name: str) -> Category:
        data = self._request("PUT", f"/categories/{category_id}", {"name": name})
        return _parse(Category, _expect_object(data))

    def delete_category(self, category_id: str) -> bool:
        self._request("DELETE", f"/categories/{category_id}")
        return True

    # -- expenses -----------------------------------------------------------

    def list_expenses(self) -> List[Expense]:
        data = self._request("GET", "/expenses")
        return [_parse(Expense, item) for item in _expect_list(data)]

    def create_expense(self, fields: ExpenseFields) -> Expense:
        data = self._request("POST", "/expenses", fields.to_payload())
        return _parse(Expense, _expect_object(data))

    def update_expense(self, expense_id: str, fields: ExpenseFields) -> Expense:
        data = self._request("PUT", f"/expenses/{expense_id}", fields.to_payload())
        return _parse(Expense, _expect_object(data))

    def delete_expense(self, expense_id: str) -> bool:
        self._request("DELETE", f"/expenses/{expense_id}")
        return True

    # -- transport ----------------------------------------------------------

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            response = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.Timeout as exc:
            logger.warning("%s %s timed out after %ss", method, url, self.timeout)
            raise NetworkError(f"Request timed out: {exc}") from exc
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise NetworkError(f"Network error: {exc}") from exc

        status = response.status_code
        if status >= 400:
            message = _error_message(response)
            logger.warning("%s %s returned %s: %s", method, url, status, message)
            raise _error_for_status(status)(message, status)

        if status == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ServerError(f"Invalid JSON from {path}", status) from exc


def _error_for_status(status: int) -> type:
    if status == 404:
        return NotFoundError
    if status in _VALIDATION_STATUSES:
        return ValidationError
    return ServerError


def _error_message(response: requests.Response) -> str:
    """Prefer the backend's ``message`` field, then the HTTP reason."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason or f"HTTP {response.status_code}"


def _parse(model: Any, item: Any) -> Any:
    if not isinstance(item, dict):
        raise ServerError(f"Malformed {model.__name__.lower()} record from the backend")
    try:
        return model.from_api(item)
    except ValueError as exc:
        raise ServerError(f"Malformed {model.__name__.lower()} record: {exc}") from exc


def _expect_list(data: Any) -> List[Dict[str, Any]]:
    if not isinstance(data, list):
        raise ServerError("Expected a JSON list from the backend")
    return data


def _expect_object(data: Any) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ServerError("Expected a JSON object from the backend")
    return data


__all__ = ["ExpenseApiClient", "ApiError"]
