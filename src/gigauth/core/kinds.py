# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Per-role knowledge: which table, which fields, which platform.

Centralising this keeps routes, services and the store role-agnostic. Every
``Role`` must have an entry in ``KINDS``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from gigauth.core.principals import Principal, Role
from gigauth.errors import InvalidPlatform


@dataclass(frozen=True)
class PrincipalKind:
    role: Role
    table: str
    id_key: str
    # external name -> column attribute, excluding id/email/password
    columns: Tuple[Tuple[str, str], ...]
    required: Tuple[str, ...]
    platform: str


KINDS: Dict[Role, PrincipalKind] = {
    Role.WORKER: PrincipalKind(
        role=Role.WORKER,
        table="workers",
        id_key="workerId",
        columns=(
            ("firstName", "first_name"),
            ("lastName", "last_name"),
            ("phoneNumber", "phone_number"),
            ("highestEducation", "highest_education"),
            ("schoolName", "school_name"),
            ("major", "major"),
            ("studyStatus", "study_status"),
            ("certificates", "certificates"),
            ("createdAt", "created_at"),
            ("updatedAt", "updated_at"),
        ),
        required=("email", "password", "firstName", "lastName"),
        platform="mobile",
    ),
    Role.EMPLOYER: PrincipalKind(
        role=Role.EMPLOYER,
        table="employers",
        id_key="employerId",
        columns=(
            ("employerName", "employer_name"),
            ("branchName", "branch_name"),
            ("industryType", "industry_type"),
            ("address", "address"),
            ("phoneNumber", "phone_number"),
            ("approvalStatus", "approval_status"),
            ("identificationType", "identification_type"),
            ("identificationNumber", "identification_number"),
            ("verificationDocuments", "verification_documents"),
            ("employerPhoto", "employer_photo"),
            ("contactInfo", "contact_info"),
            ("createdAt", "created_at"),
            ("updatedAt", "updated_at"),
        ),
        required=("email", "password", "employerName", "identificationNumber"),
        platform="web-employer",
    ),
    Role.ADMIN: PrincipalKind(
        role=Role.ADMIN,
        table="admins",
        id_key="adminId",
        columns=(("createdAt", "created_at"),),
        required=("email", "password"),
        platform="web-admin",
    ),
}

PLATFORMS: Dict[str, Role] = {k.platform: role for role, k in KINDS.items()}


def kind_for(role: Role) -> PrincipalKind:
    return KINDS[Role(role)]


def role_for_platform(platform: Optional[str]) -> Role:
    """Map the ``platform`` header to the role it serves."""
    p = (platform or "").strip().lower()
    if not p:
        raise InvalidPlatform("Platform is required")
    try:
        return PLATFORMS[p]
    except KeyError:
        raise InvalidPlatform("Platform not supported") from None


def sanitize(principal: Principal) -> Dict[str, Any]:
    """External representation of a principal: every stored field but the hash."""
    out: Dict[str, Any] = {kind_for(principal.role).id_key: principal.id, "email": principal.email}
    for key, value in principal.attributes.items():
        if isinstance(value, datetime):
            value = value.isoformat()
        out[key] = value
    return out
