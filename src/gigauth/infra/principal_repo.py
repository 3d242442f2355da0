# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple, Type

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from gigauth.core.kinds import kind_for
from gigauth.core.principals import Principal, Role
from gigauth.errors import DuplicateEmail
from gigauth.infra.db import Base
from gigauth.infra.models import Admin, Employer, Worker

logger = logging.getLogger(__name__)

# role -> (ORM model, primary key attribute)
MODELS: Dict[Role, Tuple[Type[Base], str]] = {
    Role.WORKER: (Worker, "worker_id"),
    Role.EMPLOYER: (Employer, "employer_id"),
    Role.ADMIN: (Admin, "admin_id"),
}

# Server-managed columns, never taken from input.
_SERVER_COLUMNS = {"created_at", "updated_at", "approval_status"}


class CredentialStore:
    """Lookup/insert of principals, one table per role.

    Email uniqueness is enforced by each table's unique constraint; a losing
    concurrent insert surfaces as ``DuplicateEmail``, never as a raw
    storage error.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def _to_principal(self, role: Role, row: Any) -> Principal:
        kind = kind_for(role)
        _, pk = MODELS[role]
        return Principal(
            role=role,
            id=getattr(row, pk),
            email=row.email,
            password_hash=row.password,
            attributes={key: getattr(row, col) for key, col in kind.columns},
        )

    def _email_taken(self, model: Type[Base], email: str) -> bool:
        with self._session_factory() as db:
            return db.execute(select(model.email).where(model.email == email)).first() is not None

    def find_by_email(self, role: Role, email: str) -> Optional[Principal]:
        model, _ = MODELS[role]
        with self._session_factory() as db:
            row = db.execute(select(model).where(model.email == email)).scalar_one_or_none()
            return self._to_principal(role, row) if row is not None else None

    def find_by_id(self, role: Role, principal_id: str) -> Optional[Principal]:
        model, _ = MODELS[role]
        with self._session_factory() as db:
            row = db.get(model, principal_id)
            return self._to_principal(role, row) if row is not None else None

    def insert(self, role: Role, fields: Dict[str, Any]) -> Principal:
        """Persist a new principal.

        ``fields`` uses external names plus ``email`` and ``passwordHash``.
        """
        model, _ = MODELS[role]
        kind = kind_for(role)
        values: Dict[str, Any] = {"email": fields["email"], "password": fields["passwordHash"]}
        for key, col in kind.columns:
            if col in _SERVER_COLUMNS:
                continue
            if fields.get(key) is not None:
                values[col] = fields[key]

        row = model(**values)
        with self._session_factory() as db:
            try:
                with db.begin():
                    db.add(row)
            except IntegrityError as exc:
                # Only a clash on the email column is a duplicate; other
                # constraint failures propagate unchanged.
                if not self._email_taken(model, values["email"]):
                    raise
                logger.info("Rejected duplicate %s email at insert", role.value)
                raise DuplicateEmail() from exc
            return self._to_principal(role, row)

    def update_password(self, role: Role, principal_id: str, password_hash: str) -> bool:
        model, _ = MODELS[role]
        with self._session_factory() as db:
            with db.begin():
                row = db.get(model, principal_id)
                if row is None:
                    return False
                row.password = password_hash
        return True

    def delete(self, role: Role, principal_id: str) -> bool:
        model, _ = MODELS[role]
        with self._session_factory() as db:
            with db.begin():
                row = db.get(model, principal_id)
                if row is None:
                    return False
                db.delete(row)
        return True
