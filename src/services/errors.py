"""Domain error taxonomy for debt and reserve operations.

Every error carries a machine-checkable ``code``, a human-readable
``message`` and the HTTP status the API layer answers with.
"""

from decimal import Decimal
from typing import Any, Dict

from fastapi import status

from src.services.locale_service import format_amount

# Starlette renamed the 422 constant; the literal works on every version
HTTP_422_UNPROCESSABLE = 422


class FinanceError(Exception):
    """Base application error."""

    def __init__(self, message: str, code: str, http_status: int = 400):
        """Initialize error."""
        self.message = message
        self.code = code
        self.http_status = http_status
        super().__init__(message)

    def extra(self) -> Dict[str, Any]:
        """Additional structured fields rendered next to code and message."""
        return {}


class NotFoundError(FinanceError):
    """Referenced debt, reserve or card does not exist for the owner."""

    def __init__(self, entity: str, entity_id: int | None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            f"{entity.capitalize()} {entity_id} not found",
            "not_found",
            status.HTTP_404_NOT_FOUND,
        )


class ValidationError(FinanceError):
    """Missing required field or non-positive amount."""

    def __init__(self, message: str):
        super().__init__(message, "validation_error", HTTP_422_UNPROCESSABLE)


class InsufficientReserveBalanceError(FinanceError):
    """Reserve balance does not cover the requested amount."""

    def __init__(self, available: Decimal, requested: Decimal, reserve_id: int | None = None):
        self.available = available
        self.requested = requested
        self.reserve_id = reserve_id
        super().__init__(
            f"Insufficient reserve balance: available {format_amount(available)}, "
            f"requested {format_amount(requested)}",
            "insufficient_reserve_balance",
            status.HTTP_409_CONFLICT,
        )

    def extra(self) -> Dict[str, Any]:
        return {"available": str(self.available), "requested": str(self.requested)}


class DebtAlreadyPaidError(FinanceError):
    """Debt is fully paid and accepts no further payments."""

    def __init__(self, debt_id: int):
        self.debt_id = debt_id
        super().__init__(
            f"Debt {debt_id} is already fully paid",
            "debt_already_paid",
            status.HTTP_409_CONFLICT,
        )


class OverpaymentError(FinanceError):
    """Payment exceeds what is still owed on the debt."""

    def __init__(self, remaining: Decimal, requested: Decimal):
        self.remaining = remaining
        self.requested = requested
        super().__init__(
            f"Payment of {format_amount(requested)} exceeds the remaining "
            f"{format_amount(remaining)}",
            "overpayment",
            HTTP_422_UNPROCESSABLE,
        )

    def extra(self) -> Dict[str, Any]:
        return {"remaining": str(self.remaining), "requested": str(self.requested)}


class UnauthorizedError(FinanceError):
    """Request carries no usable owner identity."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, "unauthorized", status.HTTP_401_UNAUTHORIZED)


class StorageError(FinanceError):
    """Underlying database failure; details stay in the server log."""

    def __init__(self, message: str = "Internal storage error"):
        super().__init__(message, "storage_error", status.HTTP_500_INTERNAL_SERVER_ERROR)


def error_response(error: FinanceError) -> Dict[str, Any]:
    """Create a standardized error response body."""
    return {"error": error.code, "details": error.message, **error.extra()}


__all__ = [
    "HTTP_422_UNPROCESSABLE",
    "FinanceError",
    "NotFoundError",
    "ValidationError",
    "InsufficientReserveBalanceError",
    "DebtAlreadyPaidError",
    "OverpaymentError",
    "StorageError",
    "UnauthorizedError",
    "error_response",
]
