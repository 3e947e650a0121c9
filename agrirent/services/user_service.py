from __future__ import annotations

import re
from typing import Optional

from loguru import logger

from agrirent.exceptions import UnauthorizedError, ValidationError
from agrirent.models.store import Store
from agrirent.services import common
from agrirent.utils.security import check_hash, generate_hash

# Compile once at module import
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d).{6,}$")
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]{3,30}$")


class UserService:
    """Registration and credential checks."""

    @staticmethod
    def register(username: str, password: str, store: Optional[Store] = None) -> str:
        """Create an account and return its user id. Raises ValidationError on policy failures."""
        st = store if store is not None else common._store()
        username = (username or "").strip()
        password = password or ""

        if not username or not password:
            raise ValidationError("Username and password are required.")

        # Username policy
        if not USERNAME_PATTERN.match(username):
            raise ValidationError("Username must be 3-30 chars (letters, digits, ., _, -).")

        # Password policy (server-side enforcement)
        if not PASSWORD_PATTERN.match(password):
            raise ValidationError("Password must have at least 6 characters, including A-Z, a-z, and 0-9.")

        # Extra guard: disallow password equal to username
        if password.lower() == username.lower():
            raise ValidationError("Password cannot be the same as username.")

        try:
            uid = st.create_user(username=username, password_hash=generate_hash(password))
        except ValueError:
            raise ValidationError("Username already exists.") from None
        logger.info("User {} registered as {}", username, uid)
        return uid

    @staticmethod
    def authenticate(username: str, password: str, store: Optional[Store] = None) -> dict:
        """Return the stored user for valid credentials, otherwise raise UnauthorizedError."""
        st = store if store is not None else common._store()
        user = st.find_user((username or "").strip())
        if not user or not check_hash(password or "", user["password_hash"]):
            raise UnauthorizedError("Invalid credentials")
        return user
