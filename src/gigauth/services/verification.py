# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from typing import Iterable, Optional

from gigauth.auth.passwords import PasswordHasher
from gigauth.core.principals import Principal, Role
from gigauth.errors import InvalidCredentials
from gigauth.infra.principal_repo import CredentialStore

logger = logging.getLogger(__name__)


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


class CredentialVerifier:
    """Email/password check across every principal kind.

    Unknown email and wrong password both end in ``InvalidCredentials``. Every
    call runs exactly one Argon2 verification per kind searched, against the
    stored hash when the kind has the email and a dummy hash otherwise, so
    the outcome cannot be read from the latency.
    """

    def __init__(self, store: CredentialStore, hasher: PasswordHasher) -> None:
        self._store = store
        self._hasher = hasher

    def verify(self, email: str, password: str, *, roles: Optional[Iterable[Role]] = None) -> Principal:
        address = normalize_email(email)
        wanted = list(roles) if roles is not None else list(Role)

        matched: Optional[Principal] = None
        for role in wanted:
            principal = self._store.find_by_email(role, address) if address else None
            if principal is None or not password:
                self._hasher.verify_dummy(password)
                continue
            if self._hasher.verify(password, principal.password_hash) and matched is None:
                matched = principal

        if matched is None:
            logger.info("Login failed: invalid credentials")
            raise InvalidCredentials()

        if self._hasher.needs_rehash(matched.password_hash):
            self._store.update_password(matched.role, matched.id, self._hasher.hash(password))
            logger.info("Upgraded password hash for %s %s", matched.role.value, matched.id)
        return matched
