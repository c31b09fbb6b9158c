"""Client-side auth session persisted to a JSON file."""

import json
import logging
import os
import time
from pathlib import Path

import jwt

logger = logging.getLogger(__name__)

DEFAULT_SESSION_PATH = Path.home() / ".taskmanager" / "session.json"


def default_session_path():
    return Path(os.environ.get("TASKMANAGER_SESSION", DEFAULT_SESSION_PATH))


class Session:
    """Holds the bearer token and the signed-in user.

    Nothing is read or written until ``load``, ``save`` or ``clear`` is
    called; API code receives this object instead of reaching for storage.
    """

    def __init__(self, path=None):
        self.path = Path(path) if path is not None else default_session_path()
        self.token = None
        self.user = None

    @property
    def is_authenticated(self):
        return bool(self.token)

    def set(self, token, user):
        self.token = token
        self.user = user

    def load(self):
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return self
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, exc)
            return self
        if not isinstance(data, dict):
            logger.warning("Ignoring unreadable session file %s: not a JSON object", self.path)
            return self
        self.token = data.get("token")
        self.user = data.get("user")
        return self

    def save(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"token": self.token, "user": self.user}), encoding="utf-8")
        os.chmod(self.path, 0o600)

    def clear(self):
        self.token = None
        self.user = None
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass

    def expires_at(self):
        """Return the token's ``exp`` claim without checking its signature."""
        if not self.token:
            return None
        try:
            claims = jwt.decode(self.token, options={"verify_signature": False})
        except jwt.PyJWTError:
            return None
        return claims.get("exp")

    def is_expired(self, now=None):
        exp = self.expires_at()
        if exp is None:
            return True
        return exp <= (now if now is not None else time.time())
