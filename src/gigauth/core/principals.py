# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


class Role(str, Enum):
    WORKER = "worker"
    EMPLOYER = "employer"
    ADMIN = "admin"


@dataclass(frozen=True)
class SessionUser:
    """What a session remembers about its owner."""

    id: str
    role: Role


@dataclass(frozen=True)
class Principal:
    """A stored account of one kind.

    ``attributes`` holds the kind-specific public fields keyed by their
    external (camelCase) names. The password hash lives only in
    ``password_hash`` and is never part of ``sanitize()`` output.
    """

    role: Role
    id: str
    email: str
    password_hash: str = field(repr=False)
    attributes: Dict[str, Any] = field(default_factory=dict)

    @property
    def session_user(self) -> SessionUser:
        return SessionUser(id=self.id, role=self.role)
