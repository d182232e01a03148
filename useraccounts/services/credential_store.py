# useraccounts/services/credential_store.py
# MongoDB-backed store of user accounts

import logging
from datetime import datetime, timezone
from typing import Optional

from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from useraccounts.exceptions import ConflictError, DuplicateEmailError, DuplicateMobileError
from useraccounts.models.user import normalize_email
from useraccounts.utils.auth import PasswordHasher

logger = logging.getLogger(__name__)


class CredentialStore:
    """Reads and writes user documents.

    Every write goes through ``prepare_for_save`` so the password is hashed
    exactly when it is part of the write and ``updated_at`` is always stamped.
    """

    def __init__(self, users: Collection, hasher: PasswordHasher):
        self.users = users
        self.hasher = hasher
        self._save_steps = (self.hash_password_if_changed, self.stamp_updated_at)

    # Lookups

    def find_by_email(self, email: Optional[str]) -> Optional[dict]:
        if not email:
            return None
        return self.users.find_one({"email": normalize_email(email)})

    def find_by_mobile(self, mobile_number: Optional[str]) -> Optional[dict]:
        if not mobile_number:
            return None
        return self.users.find_one({"mobile_number": mobile_number.strip()})

    def find_by_email_and_mobile(self, email: str, mobile_number: str) -> Optional[dict]:
        return self.users.find_one(
            {"email": normalize_email(email), "mobile_number": mobile_number.strip()}
        )

    def ensure_unique(self, email: str, mobile_number: str):
        """Raise a conflict naming the identifier that is already taken."""
        email = normalize_email(email)
        existing = self.users.find_one(
            {"$or": [{"email": email}, {"mobile_number": mobile_number.strip()}]}
        )
        if existing is None:
            return
        if existing["email"] == email:
            raise DuplicateEmailError()
        raise DuplicateMobileError()

    # Writes

    def hash_password_if_changed(self, changes: dict) -> dict:
        if changes.get("password") is not None:
            changes["password"] = self.hasher.hash(changes["password"])
        return changes

    def stamp_updated_at(self, changes: dict) -> dict:
        changes["updated_at"] = datetime.now(timezone.utc)
        return changes

    def prepare_for_save(self, changes: dict) -> dict:
        prepared = dict(changes)
        for step in self._save_steps:
            prepared = step(prepared)
        return prepared

    def create(self, document: dict) -> dict:
        """Insert a new user document and return it with its ``_id``."""
        self.ensure_unique(document["email"], document["mobile_number"])
        prepared = self.prepare_for_save(document)
        try:
            result = self.users.insert_one(prepared)
        except DuplicateKeyError as e:
            key_value = (e.details or {}).get("keyValue") or {}
            logger.warning(f"Duplicate key on user insert: {list(key_value)}")
            if "email" in key_value:
                raise DuplicateEmailError()
            if "mobile_number" in key_value:
                raise DuplicateMobileError()
            raise ConflictError()
        prepared["_id"] = result.inserted_id
        logger.info(f"Created new user with ID: {result.inserted_id}")
        return prepared

    def update(self, user_id, changes: dict) -> Optional[dict]:
        """Apply ``changes`` to one user and return the updated document."""
        prepared = self.prepare_for_save(changes)
        return self.users.find_one_and_update(
            {"_id": user_id},
            {"$set": prepared},
            return_document=ReturnDocument.AFTER,
        )

    def record_login(
        self, user_id, extra_changes: Optional[dict] = None, guard: Optional[dict] = None
    ) -> Optional[dict]:
        """Stamp the login time and bump the login counter in one update.

        ``guard`` adds field conditions to the filter; when they no longer
        hold the update is skipped and None is returned.
        """
        changes = dict(extra_changes or {})
        changes["last_login_at"] = datetime.now(timezone.utc)
        prepared = self.prepare_for_save(changes)
        query = dict(guard or {})
        query["_id"] = user_id
        return self.users.find_one_and_update(
            query,
            {"$set": prepared, "$inc": {"login_attempts": 1}},
            return_document=ReturnDocument.AFTER,
        )
