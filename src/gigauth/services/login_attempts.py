# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

Key = Tuple[str, str, str]  # (kind, email, client ip)


@dataclass
class _Entry:
    failures: int
    window_ends: float
    locked_until: float = 0.0


@dataclass(frozen=True)
class LoginStatus:
    locked: bool
    failed_attempts: int
    attempts_left: int
    remaining_lock_seconds: int


class LoginAttemptManager:
    """Counts failed logins per (kind, email, ip) and locks out repeat offenders.

    A failure opens (or extends) a window of ``lockout_seconds``; reaching
    ``max_attempts`` failures inside it locks the key for the same duration.
    """

    def __init__(
        self,
        *,
        max_attempts: int = 3,
        lockout_seconds: int = 5 * 60,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_attempts = max_attempts
        self.lockout_seconds = lockout_seconds
        self._clock = clock
        self._entries: Dict[Key, _Entry] = {}
        self._lock = threading.Lock()

    def _live(self, key: Key, now: float) -> Optional[_Entry]:
        entry = self._entries.get(key)
        if entry is not None and now >= entry.window_ends and now >= entry.locked_until:
            del self._entries[key]
            return None
        return entry

    def status(self, key: Key) -> LoginStatus:
        now = self._clock()
        with self._lock:
            entry = self._live(key, now)
            if entry is None:
                return LoginStatus(False, 0, self.max_attempts, 0)
            remaining = max(0.0, entry.locked_until - now)
            return LoginStatus(
                locked=remaining > 0,
                failed_attempts=entry.failures,
                attempts_left=max(0, self.max_attempts - entry.failures),
                remaining_lock_seconds=math.ceil(remaining),
            )

    def record_failure(self, key: Key) -> LoginStatus:
        now = self._clock()
        with self._lock:
            entry = self._live(key, now)
            if entry is None:
                entry = _Entry(failures=0, window_ends=now)
                self._entries[key] = entry
            entry.failures += 1
            entry.window_ends = now + self.lockout_seconds
            if entry.failures >= self.max_attempts:
                entry.locked_until = now + self.lockout_seconds
                logger.warning("Login locked for %s as %s", key[1], key[0] or "any kind")
        return self.status(key)

    def clear(self, key: Key) -> None:
        with self._lock:
            self._entries.pop(key, None)
