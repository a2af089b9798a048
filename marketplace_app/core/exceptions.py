"""Typed errors raised by the authorization evaluator and the state machines.

Every error is an ``HTTPException`` so FastAPI renders it without extra
wiring, and every error carries a stable ``kind`` that callers can branch on
without parsing messages.
"""

from fastapi import HTTPException, status


class MarketplaceError(HTTPException):
    kind: str = "error"
    status_code_default: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str, *, status_code: int | None = None):
        super().__init__(
            status_code=status_code or self.status_code_default, detail=detail
        )

    @property
    def message(self) -> str:
        return str(self.detail)


class NotFoundError(MarketplaceError):
    kind = "not_found"
    status_code_default = status.HTTP_404_NOT_FOUND


class UserNotFound(NotFoundError):
    kind = "user_not_found"

    def __init__(self, detail: str = "User not found"):
        super().__init__(detail)


class NotAvailableError(MarketplaceError):
    kind = "not_available"
    status_code_default = status.HTTP_404_NOT_FOUND


class ValidationFailed(MarketplaceError):
    kind = "validation_error"
    status_code_default = status.HTTP_400_BAD_REQUEST


class ConflictError(MarketplaceError):
    kind = "conflict"
    status_code_default = status.HTTP_409_CONFLICT


class ForbiddenTransition(MarketplaceError):
    kind = "forbidden_transition"
    status_code_default = status.HTTP_403_FORBIDDEN


class ForbiddenError(MarketplaceError):
    kind = "forbidden"
    status_code_default = status.HTTP_403_FORBIDDEN


class Unauthenticated(MarketplaceError):
    kind = "unauthenticated"
    status_code_default = status.HTTP_401_UNAUTHORIZED

    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(detail)
