"""
Username/password lookup used to gate the editing commands.

Passwords are stored and compared in cleartext. This is a known weakness kept
so that existing credential files stay readable; do not rely on it for anything
that needs real protection.
"""
import logging
from pathlib import Path

from .errors import PersistenceError
from . import storage

logger = logging.getLogger(__name__)


class CredentialStore:

    def __init__(self, path):
        self.path = Path(path)
        self.users = {}

    @classmethod
    def open(cls, path):
        store = cls(path)
        store.load()
        return store

    def __contains__(self, username):
        return username in self.users

    def load(self):
        try:
            data = storage.load_document(self.path)
            users = data.get('users') or {}
            if not isinstance(users, dict) or not all(
                isinstance(k, str) and isinstance(v, str) for k, v in users.items()
            ):
                raise PersistenceError(f"'users' in {self.path} must map usernames to passwords")
        except PersistenceError as e:
            logger.warning("Starting with no registered users: %s", e)
            self.users = {}
            return
        self.users = dict(users)
        logger.info("Loaded %d user(s) from %s", len(self.users), self.path)

    def save(self):
        try:
            storage.save_document(self.path, {'users': self.users})
        except PersistenceError as e:
            logger.error("Credential changes were not saved: %s", e)
            return False
        return True

    def verify(self, username, password):
        return username in self.users and self.users[username] == password

    def register(self, username, password):
        """Adds username, replacing the password if the user already exists."""
        self.users[username] = password
        self.save()
