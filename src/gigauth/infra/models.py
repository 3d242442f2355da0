# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, String, Text

from gigauth.infra.db import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Worker(Base):
    __tablename__ = "workers"

    worker_id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(Text, unique=True, nullable=False, index=True)
    password = Column(Text, nullable=False)

    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    phone_number = Column(Text)

    highest_education = Column(String(32))
    school_name = Column(Text)
    major = Column(Text)
    study_status = Column(String(32))
    certificates = Column(JSON, default=list)

    created_at = Column(DateTime(timezone=True), default=_now)
    updated_at = Column(DateTime(timezone=True), default=_now, onupdate=_now)


class Employer(Base):
    __tablename__ = "employers"

    employer_id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(Text, unique=True, nullable=False, index=True)
    password = Column(Text, nullable=False)

    employer_name = Column(Text, nullable=False)
    branch_name = Column(Text)
    industry_type = Column(String(32))
    address = Column(Text)
    phone_number = Column(Text)

    approval_status = Column(String(16), nullable=False, default="pending")  # pending | approved | rejected
    identification_type = Column(String(16), nullable=False, default="businessNo")  # businessNo | personalId
    identification_number = Column(String(50))
    verification_documents = Column(JSON)
    employer_photo = Column(JSON)
    contact_info = Column(JSON)

    created_at = Column(DateTime(timezone=True), default=_now)
    updated_at = Column(DateTime(timezone=True), default=_now, onupdate=_now)


class Admin(Base):
    __tablename__ = "admins"

    admin_id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(Text, unique=True, nullable=False, index=True)
    password = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), default=_now)
