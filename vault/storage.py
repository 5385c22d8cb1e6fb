#!/usr/bin/env python3
"""
User record storage

Keeps every account as a JSON-shaped record keyed by email, plus a single key
naming the email of the active session. Reads and writes are whole-value: the
full users mapping is loaded and written back on every save.

Write failures are logged and re-raised. Nothing is rolled back, so a failed
save leaves the in-memory user ahead of the stored one.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Dict, Optional

from vault.constants import USERS_KEY, CURRENT_USER_KEY

logger = logging.getLogger(__name__)


class UserStore:
    """Base store: subclasses provide _read() and _write() of the whole document"""

    def _read(self) -> Dict:
        raise NotImplementedError

    def _write(self, document: Dict):
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Users mapping
    # ------------------------------------------------------------------

    def load_users(self) -> Dict[str, Dict]:
        users = self._read().get(USERS_KEY)
        return users if isinstance(users, dict) else {}

    def save_users(self, users: Dict[str, Dict]):
        document = self._read()
        document[USERS_KEY] = users
        self._write(document)

    def get_user_record(self, email: str) -> Optional[Dict]:
        return self.load_users().get(email)

    def has_user(self, email: str) -> bool:
        return email in self.load_users()

    def save_user(self, user):
        """Write the full user record and mark it as the active session"""
        document = self._read()
        users = document.get(USERS_KEY)
        if not isinstance(users, dict):
            users = {}
        users[user.email] = user.to_dict()
        document[USERS_KEY] = users
        document[CURRENT_USER_KEY] = user.email
        self._write(document)
        logger.debug(f"Saved user record for {user.email}")

    # ------------------------------------------------------------------
    # Active session key
    # ------------------------------------------------------------------

    def get_active_email(self) -> Optional[str]:
        return self._read().get(CURRENT_USER_KEY) or None

    def set_active_email(self, email: str):
        document = self._read()
        document[CURRENT_USER_KEY] = email
        self._write(document)

    def clear_active_email(self):
        document = self._read()
        if document.pop(CURRENT_USER_KEY, None) is not None:
            self._write(document)


class MemoryUserStore(UserStore):
    """In-process store, mainly for tests"""

    def __init__(self, document: Optional[Dict] = None):
        self._document = copy.deepcopy(document) if document else {}

    def _read(self) -> Dict:
        return copy.deepcopy(self._document)

    def _write(self, document: Dict):
        # Round-trip through JSON so only plain JSON values are ever stored
        self._document = json.loads(json.dumps(document))


class JsonFileUserStore(UserStore):
    """Store backed by one JSON file on disk"""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> Dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read user store {self.path}: {e}. Treating as empty.")
            return {}
        if not isinstance(document, dict):
            logger.warning(f"User store {self.path} is not a JSON object. Treating as empty.")
            return {}
        return document

    def _write(self, document: Dict):
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to write user store {self.path}: {e}")
            raise
