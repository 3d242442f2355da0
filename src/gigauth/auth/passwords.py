# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import hashlib
import hmac
import threading
from typing import Optional

from argon2 import PasswordHasher as Argon2Hasher
from argon2 import Type
from argon2.exceptions import InvalidHashError, VerificationError

from gigauth.errors import ConfigurationError

DEFAULT_TIME_COST = 6
DEFAULT_PARALLELISM = 6
DEFAULT_MEMORY_COST = 65536  # KiB


class PasswordHasher:
    """Argon2id hashing with a server-side pepper.

    argon2-cffi does not expose Argon2's secret-key input, so the pepper is
    applied as HMAC-SHA256(pepper, password) before hashing. The stored hash
    is useless without the pepper, which is never written next to it.

    Both ``hash`` and ``verify`` are CPU and memory heavy; call them from a
    worker thread, never directly on the event loop.
    """

    def __init__(
        self,
        secret: str,
        *,
        time_cost: int = DEFAULT_TIME_COST,
        parallelism: int = DEFAULT_PARALLELISM,
        memory_cost: int = DEFAULT_MEMORY_COST,
    ) -> None:
        if not secret:
            raise ConfigurationError("Hashing secret is required")
        self._pepper = secret.encode("utf-8")
        self._ph = Argon2Hasher(
            time_cost=time_cost,
            parallelism=parallelism,
            memory_cost=memory_cost,
            type=Type.ID,
        )
        self._dummy: Optional[str] = None
        self._dummy_lock = threading.Lock()

    def _peppered(self, plain: str) -> str:
        return hmac.new(self._pepper, plain.encode("utf-8"), hashlib.sha256).hexdigest()

    def hash(self, plain: str) -> str:
        if not plain:
            raise ValueError("Empty password")
        return self._ph.hash(self._peppered(plain))

    def verify(self, plain: str, hash_value: str) -> bool:
        if not hash_value or not plain:
            return False
        try:
            return self._ph.verify(hash_value, self._peppered(plain))
        except (VerificationError, InvalidHashError):
            return False

    def needs_rehash(self, hash_value: str) -> bool:
        return self._ph.check_needs_rehash(hash_value)

    def dummy_hash(self) -> str:
        """A valid hash with the current parameters, used to equalise timing on misses."""
        with self._dummy_lock:
            if self._dummy is None:
                self._dummy = self.hash("dummy-password-for-timing")
            return self._dummy

    def verify_dummy(self, plain: str) -> bool:
        self.verify(plain or "x", self.dummy_hash())
        return False
