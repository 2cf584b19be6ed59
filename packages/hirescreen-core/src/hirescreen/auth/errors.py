"""Error kinds raised by the auth service.

Each error carries the HTTP status the service layer should answer with and
a public message. Messages for credential and token failures are fixed so
callers cannot tell which check rejected them.
"""

from __future__ import annotations


class AuthError(Exception):
    """Base class for failures the caller is expected to handle."""

    status_code: int = 400
    message: str = "Authentication error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message


class DuplicateUser(AuthError):
    status_code = 409
    message = "User with this email already exists"


class InvalidCredentials(AuthError):
    status_code = 401
    message = "Invalid credentials"


class AccountDeactivated(AuthError):
    status_code = 403
    message = "Account is deactivated"


class CompanyDeactivated(AuthError):
    status_code = 403
    message = "Company account is deactivated"


class CompanyNotFound(AuthError):
    status_code = 404
    message = "Company not found"


class InvalidPassword(AuthError):
    status_code = 422
    message = "Password must be at most 72 bytes"


class UserNotInCompany(AuthError):
    """The target user does not exist or belongs to another company."""

    status_code = 404
    message = "User not found"


class InvalidRefreshToken(AuthError):
    status_code = 401
    message = "Invalid refresh token"


class InvalidToken(AuthError):
    status_code = 401
    message = "Invalid token"


class UserNotFound(AuthError):
    """Token generation was asked for a user that does not exist.

    Callers always pass an id they just validated, so this indicates a bug
    or a concurrent hard delete, not bad user input.
    """

    status_code = 500
    message = "User not found"


class StoreError(Exception):
    """Raised by persistence stores; the auth service does not interpret it."""
