# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

import yaml

from gigauth.core.principals import Role
from gigauth.errors import DuplicateEmail
from gigauth.infra.principal_repo import CredentialStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminSeed:
    email: str
    password_hash: str
    active: bool


def load_admin_seed(path: Path) -> Dict[str, AdminSeed]:
    """Read ``admins: {<email>: {password_hash, active}}`` from a YAML file."""
    if not path.exists():
        return {}
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    admins = (raw.get("admins") or {}) if isinstance(raw, dict) else {}
    out: Dict[str, AdminSeed] = {}
    for email, data in admins.items():
        if not isinstance(data, dict):
            continue
        address = str(email or "").strip().lower()
        ph = str(data.get("password_hash") or "").strip()
        if not address or not ph:
            continue
        out[address] = AdminSeed(email=address, password_hash=ph, active=bool(data.get("active", True)))
    return out


def seed_admins(store: CredentialStore, path: Path) -> int:
    """Insert active admins from ``path`` that the store does not know yet."""
    created = 0
    for seed in load_admin_seed(path).values():
        if not seed.active or store.find_by_email(Role.ADMIN, seed.email) is not None:
            continue
        try:
            store.insert(Role.ADMIN, {"email": seed.email, "passwordHash": seed.password_hash})
        except DuplicateEmail:
            continue
        created += 1
    if created:
        logger.info("Provisioned %d admin account(s) from %s", created, path)
    return created
