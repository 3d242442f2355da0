# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from gigauth.auth.passwords import PasswordHasher
from gigauth.core.kinds import kind_for, role_for_platform, sanitize
from gigauth.core.principals import Role
from gigauth.errors import DuplicateEmail, InvalidPlatform, MissingDocument, MissingField, ValidationError
from gigauth.infra.principal_repo import CredentialStore
from gigauth.services.verification import normalize_email

logger = logging.getLogger(__name__)

REGISTRABLE = (Role.WORKER, Role.EMPLOYER)
IDENTIFICATION_TYPES = ("businessNo", "personalId")
WORKER_DEFAULTS = {"highestEducation": "大學", "studyStatus": "就讀中"}


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


class RegistrationService:
    def __init__(self, store: CredentialStore, hasher: PasswordHasher) -> None:
        self._store = store
        self._hasher = hasher

    def register(self, role: Role, fields: Dict[str, Any], *, platform: Optional[str]) -> Dict[str, Any]:
        """Create a worker or employer account and return it without its password.

        Workers accept any non-empty ``platform``; employers must come from
        ``web-employer``. The email pre-check only gives an early 409; the
        table's unique constraint is what actually prevents duplicates. No
        session is opened here.
        """
        if role not in REGISTRABLE:
            raise ValueError(f"{role.value} accounts cannot be registered")
        if role is Role.WORKER:
            if not (platform or "").strip():
                raise InvalidPlatform("Platform is required")
        elif role_for_platform(platform) is not role:
            raise InvalidPlatform()

        kind = kind_for(role)
        data = dict(fields)
        for name in kind.required:
            if not _present(data.get(name)):
                raise MissingField(name)
        data["email"] = normalize_email(data["email"])

        if self._store.find_by_email(role, data["email"]) is not None:
            logger.info("Rejected duplicate %s registration", role.value)
            raise DuplicateEmail()

        if role is Role.EMPLOYER:
            self._check_employer(data)
        else:
            for name, value in WORKER_DEFAULTS.items():
                if not _present(data.get(name)):
                    data[name] = value
            if data.get("certificates") is None:
                data["certificates"] = []

        data["passwordHash"] = self._hasher.hash(data.pop("password"))
        principal = self._store.insert(role, data)
        logger.info("Registered %s %s", role.value, principal.id)
        return sanitize(principal)

    def _check_employer(self, data: Dict[str, Any]) -> None:
        id_type = data.get("identificationType") or "businessNo"
        if id_type not in IDENTIFICATION_TYPES:
            raise ValidationError(f"identificationType must be one of {', '.join(IDENTIFICATION_TYPES)}")
        data["identificationType"] = id_type
        # Documents are uploaded and stored upstream; only their references arrive here.
        documents = data.get("verificationDocuments")
        if not documents:
            raise MissingDocument()
        if not isinstance(documents, list):
            data["verificationDocuments"] = [documents]
