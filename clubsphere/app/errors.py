"""
errors.py — AppError base class and error code registry.

Every error returned by the ClubSphere API must use a code defined here.
Do not raise strings or generic exceptions from service or route code.

Rules:
  - Error codes are a versioned contract. They do not change once published.
  - Error messages are human-readable prose. They may be improved at any time.
  - Never conflate 401 (unauthenticated) with 403 (unauthorized). See AUTH below.
"""

from __future__ import annotations


class AppError(Exception):

    def __init__(
            self,
            code: str,
            message: str,
            http_status: int,
            field: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code        = code
        self.message     = message
        self.http_status = http_status
        self.field       = field  # which request field caused the error

    def to_dict(self) -> dict:
        payload = {
            "code":    self.code,
            "message": self.message,
        }
        if self.field is not None:
            payload["field"] = self.field
        return {"error": payload}

    def __repr__(self) -> str:
        return (
            f"AppError(code={self.code!r}, "
            f"http_status={self.http_status}, "
            f"message={self.message!r})"
        )


# ── Error Code Registry ────────────────────────────────────────────────────
#
# Organised by category. HTTP status is indicated in the comment.
#
# IMPORTANT: these are the string values sent in the API response.
# Do not rename them without a major version bump.
# ──────────────────────────────────────────────────────────────────────────

class ErrorCode:

    # ── Input Errors (400) ─────────────────────────────────────────────────
    MISSING_FIELD              = "MISSING_FIELD"
    INVALID_FIELD              = "INVALID_FIELD"
    INVALID_STATUS             = "INVALID_STATUS"
    INVALID_ROLE               = "INVALID_ROLE"
    INVALID_CATEGORY           = "INVALID_CATEGORY"
    PAYMENT_REQUIRED           = "PAYMENT_REQUIRED"
    FREE_TO_JOIN               = "FREE_TO_JOIN"
    FREE_EVENT                 = "FREE_EVENT"
    PAYMENT_NOT_SUCCEEDED      = "PAYMENT_NOT_SUCCEEDED"
    CANNOT_MODIFY_SELF         = "CANNOT_MODIFY_SELF"

    # ── Conflict Errors (409) ──────────────────────────────────────────────
    DUPLICATE_EMAIL            = "DUPLICATE_EMAIL"
    ALREADY_MEMBER             = "ALREADY_MEMBER"
    ALREADY_REGISTERED         = "ALREADY_REGISTERED"
    EVENT_FULL                 = "EVENT_FULL"             # capacity reached

    # ── Not Found Errors (404) ─────────────────────────────────────────────
    USER_NOT_FOUND             = "USER_NOT_FOUND"
    CLUB_NOT_FOUND             = "CLUB_NOT_FOUND"
    EVENT_NOT_FOUND            = "EVENT_NOT_FOUND"
    REGISTRATION_NOT_FOUND     = "REGISTRATION_NOT_FOUND"
    PAYMENT_NOT_FOUND          = "PAYMENT_NOT_FOUND"
    ROUTE_NOT_FOUND            = "ROUTE_NOT_FOUND"

    # ── State Violations (422) ─────────────────────────────────────────────
    EVENT_IN_PAST              = "EVENT_IN_PAST"

    # ── Auth Errors ────────────────────────────────────────────────────────
    # 401 = we do not know who you are (unauthenticated)
    # 403 = we know who you are, but you are not allowed (role or ownership)
    INVALID_CREDENTIALS        = "INVALID_CREDENTIALS"    # 401
    TOKEN_MISSING              = "TOKEN_MISSING"          # 401
    TOKEN_INVALID              = "TOKEN_INVALID"          # 401
    TOKEN_EXPIRED              = "TOKEN_EXPIRED"          # 401
    FORBIDDEN                  = "FORBIDDEN"              # 403

    # ── Protocol Errors ────────────────────────────────────────────────────
    METHOD_NOT_ALLOWED         = "METHOD_NOT_ALLOWED"     # 405

    # ── Upstream / System Errors ───────────────────────────────────────────
    PAYMENT_PROVIDER_ERROR     = "PAYMENT_PROVIDER_ERROR"  # 502
    INTERNAL_ERROR             = "INTERNAL_ERROR"          # 500


# ── Shorthand constructors ─────────────────────────────────────────────────
# Services raise these kinds repeatedly; keeping the status codes in one
# place keeps them from drifting.

def not_found(code: str, message: str) -> AppError:
    return AppError(code, message, 404)


def forbidden(message: str) -> AppError:
    return AppError(ErrorCode.FORBIDDEN, message, 403)


def conflict(code: str, message: str) -> AppError:
    return AppError(code, message, 409)


def invalid_input(code: str, message: str, field: str | None = None) -> AppError:
    return AppError(code, message, 400, field=field)
