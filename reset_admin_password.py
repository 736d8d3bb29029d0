#!/usr/bin/env python3
"""
Reset an administrator's password in the NotesFlow SQLite database.

This script DOES NOT read or reveal any existing passwords. It simply sets a new password
hash (PBKDF2-HMAC-SHA256, format "salthex$hashhex") for the given admin email, creating
the account if it does not exist yet.

Usage:
    python reset_admin_password.py --db ./notesflow.db --email admin@notesflow.local --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import asyncio
import getpass
import os
import sys

from notesflow_api.app.core.config import settings
from notesflow_api.app.core.db import get_database_path
from notesflow_api.app.core.errors import StorageUnavailableError
from notesflow_api.app.core.storage import get_store
from notesflow_api.app.services.auth_service import AuthService


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Reset NotesFlow admin password (SQLite).")
    ap.add_argument("--db", help="Path to SQLite DB file, relative to the current directory "
                                 "(default: $DATABASE_URL, relative to the project root)")
    ap.add_argument("--email", default=settings.admin_email, help="Admin email to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    ap.add_argument("--create", action="store_true", help="Create the DB file if it does not exist")
    args = ap.parse_args(argv)

    # The file checked here is the file written below.
    if args.db:
        db_path = os.path.abspath(args.db)
    else:
        try:
            db_path = get_database_path()
        except StorageUnavailableError as exc:
            print(f"[!] {exc.message}", file=sys.stderr)
            return 1
    if not args.create and not os.path.exists(db_path):
        print(f"[!] DB not found: {db_path}", file=sys.stderr)
        return 1

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if not new_password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        return 1

    settings.storage_backend = "sqlite"
    settings.database_url = db_path
    try:
        get_store().initialise()
        asyncio.run(AuthService.set_admin_password(args.email, new_password))
    except StorageUnavailableError as exc:
        print(f"[!] {exc.message}", file=sys.stderr)
        return 2
    print(f"[+] Password updated for admin: {args.email.strip().lower()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
