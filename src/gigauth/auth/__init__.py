# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authentication building blocks.

This package provides:
- Peppered password hashing/verification (argon2id)
- Server-side sessions proven by signed cookies (itsdangerous)
- Admin account provisioning from data/admins.yml
"""
