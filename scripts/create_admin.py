#!/usr/bin/env python3
from __future__ import annotations

from getpass import getpass

import yaml

from gigauth.auth.passwords import PasswordHasher
from gigauth.config import load_settings


def main() -> None:
    settings = load_settings()
    path = settings.admins_path
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists():
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    else:
        raw = {"version": 1, "admins": {}}

    if "admins" not in raw or not isinstance(raw["admins"], dict):
        raw["admins"] = {}

    email = input("Email: ").strip().lower()
    active_in = input("Active? [Y/n]: ").strip().lower()
    active = (active_in != "n")

    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")

    hasher = PasswordHasher(
        settings.hashing_secret,
        time_cost=settings.argon2_time_cost,
        parallelism=settings.argon2_parallelism,
        memory_cost=settings.argon2_memory_cost,
    )
    raw["admins"][email] = {
        "active": active,
        "password_hash": hasher.hash(pw1),
    }

    path.write_text(yaml.safe_dump(raw, sort_keys=False, allow_unicode=True), encoding="utf-8")
    print(f"OK -> {path} (loaded into the database on next start)")


if __name__ == "__main__":
    main()
