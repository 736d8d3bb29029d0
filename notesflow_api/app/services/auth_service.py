"""Administrator accounts and credential checks."""

from __future__ import annotations

import logging
from typing import Optional

from notesflow_api.app.core.db import utc_now
from notesflow_api.app.core.security import hash_password, verify_password
from notesflow_api.app.core.storage import get_store

logger = logging.getLogger(__name__)


class AuthService:
    @classmethod
    async def authenticate_admin(cls, email: str, password: str) -> Optional[str]:
        """Return the admin's normalised e‑mail if the credentials match, else ``None``."""
        email = email.strip().lower()
        record = get_store().get("admins", email)
        if record is None or not verify_password(password, record["password"]):
            logger.warning("Failed admin login for %s", email)
            return None
        return email

    @classmethod
    async def set_admin_password(cls, email: str, password: str) -> None:
        """Create the admin account or replace its password."""
        store = get_store()
        email = email.strip().lower()
        store.delete("admins", email)
        store.insert("admins", {"email": email, "password": hash_password(password), "created_at": utc_now()})
        logger.info("Password set for admin %s", email)
