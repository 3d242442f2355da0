# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import hashlib
import logging
import secrets
import threading
import time
from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional, Tuple

from itsdangerous import BadSignature, Signer

from gigauth.core.principals import SessionUser
from gigauth.errors import ConfigurationError

logger = logging.getLogger(__name__)

COOKIE_PREFIX = "s:"
DEFAULT_MAX_AGE_SECONDS = 60 * 60 * 24  # 24 hours


@dataclass(frozen=True)
class SessionRecord:
    sid: str
    user: SessionUser
    created_at: float
    expires_at: float
    last_seen: float

    def expired(self, now: float) -> bool:
        return now >= self.expires_at


class MemorySessionStore:
    """Process-local session records keyed by session id."""

    def __init__(self) -> None:
        self._records: Dict[str, SessionRecord] = {}
        self._lock = threading.Lock()

    def get(self, sid: str) -> Optional[SessionRecord]:
        with self._lock:
            return self._records.get(sid)

    def set(self, record: SessionRecord) -> None:
        with self._lock:
            self._records[record.sid] = record

    def touch(self, sid: str, now: float) -> None:
        # Only updates live records: a destroyed session stays destroyed.
        with self._lock:
            rec = self._records.get(sid)
            if rec is not None:
                self._records[sid] = replace(rec, last_seen=now)

    def delete(self, sid: str) -> bool:
        with self._lock:
            return self._records.pop(sid, None) is not None

    def purge_expired(self, now: float) -> int:
        with self._lock:
            stale = [sid for sid, rec in self._records.items() if rec.expired(now)]
            for sid in stale:
                del self._records[sid]
            return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


class SessionManager:
    """Issues, validates and destroys sessions.

    Cookie value format is ``s:<sid>.<signature>`` where the signature is an
    HMAC-SHA256 over the sid keyed by the session secret.

    Expiry is fixed: a session dies ``max_age`` seconds after login no matter
    how active it is. Each authenticated request only refreshes ``last_seen``.
    """

    def __init__(
        self,
        secret: str,
        *,
        max_age: int = DEFAULT_MAX_AGE_SECONDS,
        store: Optional[MemorySessionStore] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret:
            raise ConfigurationError("Session secret is required")
        self._signer = Signer(
            secret,
            salt="gigauth.session",
            key_derivation="hmac",
            digest_method=hashlib.sha256,
        )
        self.max_age = max_age
        self.store = store if store is not None else MemorySessionStore()
        self._clock = clock

    def sign(self, sid: str) -> str:
        return COOKIE_PREFIX + self._signer.sign(sid).decode("utf-8")

    def unsign(self, cookie_value: str) -> Optional[str]:
        """Return the sid if the signature checks out, else None."""
        if not cookie_value or not cookie_value.startswith(COOKIE_PREFIX):
            return None
        try:
            # Signer.verify_signature compares in constant time.
            return self._signer.unsign(cookie_value[len(COOKIE_PREFIX):]).decode("utf-8")
        except BadSignature:
            return None

    def create(self, user: SessionUser) -> Tuple[SessionRecord, str]:
        now = self._clock()
        record = SessionRecord(
            sid=secrets.token_urlsafe(32),
            user=user,
            created_at=now,
            expires_at=now + self.max_age,
            last_seen=now,
        )
        self.store.set(record)
        logger.info("Session opened for %s %s", user.role.value, user.id)
        return record, self.sign(record.sid)

    def resolve(self, cookie_value: Optional[str]) -> Optional[SessionUser]:
        sid = self.unsign(cookie_value or "")
        if sid is None:
            return None
        record = self.store.get(sid)
        if record is None:
            return None
        now = self._clock()
        if record.expired(now):
            self.store.delete(sid)
            return None
        self.store.touch(sid, now)
        return record.user

    def destroy(self, cookie_value: Optional[str]) -> bool:
        sid = self.unsign(cookie_value or "")
        if sid is None:
            return False
        removed = self.store.delete(sid)
        if removed:
            logger.info("Session closed")
        return removed

    def sweep(self) -> int:
        purged = self.store.purge_expired(self._clock())
        if purged:
            logger.info("Purged %d expired session(s)", purged)
        return purged
