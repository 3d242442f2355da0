# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Worker/employer authentication and session service."""

__version__ = "0.1.0"
