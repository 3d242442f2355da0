# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Optional

from fastapi import Request

from gigauth.config import Settings
from gigauth.core.principals import Role, SessionUser
from gigauth.errors import Forbidden, Unauthorized


def load_user_from_request(request: Request) -> Optional[SessionUser]:
    token = request.cookies.get(request.app.state.settings.cookie_name, "")
    return request.app.state.sessions.resolve(token)


def current_user_optional(request: Request) -> Optional[SessionUser]:
    if hasattr(request.state, "user"):
        return request.state.user
    return load_user_from_request(request)


def require_user(request: Request) -> SessionUser:
    """Gate for protected routes: no valid session, no handler."""
    u = current_user_optional(request)
    if u is None:
        raise Unauthorized()
    return u


def require_role(*roles: Role):
    allowed = frozenset(roles)

    def _dep(request: Request) -> SessionUser:
        u = require_user(request)
        if u.role not in allowed:
            raise Forbidden(f"Only {', '.join(r.value for r in roles)} may do this")
        return u

    return _dep


def cookie_settings(settings: Settings) -> dict:
    return {
        "httponly": True,
        "samesite": "lax",
        "secure": settings.cookie_secure,
        "max_age": settings.session_max_age,
    }
