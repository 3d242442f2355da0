# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy.

Every error that may reach a client carries an HTTP status and a client-safe
``detail``. ``ConfigurationError`` is raised at startup only.
"""

from __future__ import annotations

from typing import Optional


class ConfigurationError(RuntimeError):
    """Required configuration (secrets) is missing or malformed."""


class AuthError(Exception):
    status_code = 400
    detail = "Bad request"

    def __init__(self, detail: Optional[str] = None) -> None:
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class ValidationError(AuthError):
    status_code = 400
    detail = "Invalid request"


class MissingField(ValidationError):
    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Missing required field: {field}")


class InvalidPlatform(AuthError):
    status_code = 400
    detail = "Invalid platform"


class MissingDocument(AuthError):
    status_code = 400
    detail = "Invalid identification document"


class DuplicateEmail(AuthError):
    status_code = 409
    detail = "User with this email already exists"


class InvalidCredentials(AuthError):
    status_code = 401
    detail = "Invalid email or password"


class Unauthorized(AuthError):
    status_code = 401
    detail = "Unauthorized"


class Forbidden(AuthError):
    status_code = 403
    detail = "Forbidden"


class NotFound(AuthError):
    status_code = 404
    detail = "Not found"


class TooManyAttempts(AuthError):
    status_code = 429
    detail = "Too many failed login attempts, try again later"

    def __init__(self, retry_after: int) -> None:
        self.retry_after = retry_after
        super().__init__()
