"""Business and resource errors raised by the expense/budget services.

Each error carries a stable ``code`` and the HTTP status the API layer maps
it to, so routers never translate them by hand (see core/errors.py).
"""

from __future__ import annotations

from typing import Optional


class ServiceError(Exception):
    code = "SERVICE_ERROR"
    status_code = 400
    error_type = "SERVICE_ERROR"
    default_message = "The request could not be completed."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def as_dict(self) -> dict:
        return {"error": self.code, "message": self.message, "type": self.error_type}


class BusinessError(ServiceError):
    """Expected precondition failure the user can fix (not a bug)."""

    error_type = "BUSINESS_ERROR"


class BudgetRequired(BusinessError):
    code = "BUDGET_REQUIRED"
    default_message = "Please set up a budget first before adding expenses."


class BaseCurrencyRequired(BusinessError):
    code = "BASE_CURRENCY_REQUIRED"
    default_message = (
        "Please select your base currency in settings before adding expenses."
    )


class NotFoundError(ServiceError):
    code = "NOT_FOUND"
    status_code = 404
    error_type = "RESOURCE_ERROR"
    default_message = "Resource not found."


class UnauthorizedError(ServiceError):
    code = "UNAUTHORIZED"
    status_code = 403
    error_type = "RESOURCE_ERROR"
    default_message = "Resource belongs to another user."


__all__ = [
    "ServiceError",
    "BusinessError",
    "BudgetRequired",
    "BaseCurrencyRequired",
    "NotFoundError",
    "UnauthorizedError",
]
