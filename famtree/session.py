import logging
from pathlib import Path

from .errors import AuthenticationError, PersistenceError
from . import storage

logger = logging.getLogger(__name__)

SIGNED_OUT = 'signed_out'
SIGNED_IN = 'signed_in'


class Session:
    """
    Tracks who is signed in.

    With wipe_tree_on_sign_in enabled a successful sign-in resets the family
    tree. This is kept so existing workflows behave the same, but it loses
    data and should be turned off in the project settings for real use.

    The signed-in user is kept in a small file so that separate command
    invocations share one session. Without a path the session lives in memory.
    """

    def __init__(self, credentials, tree, path=None, wipe_tree_on_sign_in=True):
        self.credentials = credentials
        self.tree = tree
        self.path = Path(path) if path else None
        self.wipe_tree_on_sign_in = wipe_tree_on_sign_in
        self.user = None

    @classmethod
    def open(cls, credentials, tree, path, wipe_tree_on_sign_in=True):
        session = cls(credentials, tree, path=path, wipe_tree_on_sign_in=wipe_tree_on_sign_in)
        session.load()
        return session

    @property
    def state(self):
        return SIGNED_IN if self.user is not None else SIGNED_OUT

    @property
    def signed_in(self):
        return self.user is not None

    def load(self):
        if self.path is None:
            return
        try:
            user = storage.load_document(self.path).get('user')
        except PersistenceError as e:
            logger.debug("No saved session: %s", e)
            user = None
        # A session for a user that no longer verifies is ignored.
        self.user = user if isinstance(user, str) and user in self.credentials else None

    def _save(self):
        if self.path is None:
            return
        try:
            storage.save_document(self.path, {'user': self.user})
        except PersistenceError as e:
            logger.error("Session state was not saved: %s", e)

    def sign_in(self, username, password):
        if self.signed_in:
            raise AuthenticationError(f"Already signed in as {self.user}. Sign out first.")
        if not self.credentials.verify(username, password):
            raise AuthenticationError("Invalid credentials.")
        self.user = username
        self._save()
        if self.wipe_tree_on_sign_in:
            logger.warning("Sign-in resets the family tree (wipe_tree_on_sign_in is enabled)")
            self.tree.reset()

    def sign_out(self):
        if not self.signed_in:
            raise AuthenticationError("Not signed in.")
        self.user = None
        self._save()

    def require_signed_in(self):
        if not self.signed_in:
            raise AuthenticationError("You must sign in first.")
