# SPDX-License-Identifier: GPL-3.0-only

import json
import os
from typing import Optional, Protocol

from pydantic import ValidationError

from logutils import get_logger
from schemas.v1.models import Session
from utils import get_env_var, obfuscate_email

logger = get_logger(__name__)


class SessionStore(Protocol):
    """Where the access token and cached user live between requests."""

    def load(self) -> Optional[Session]: ...

    def save(self, session: Session) -> None: ...

    def clear(self) -> None: ...


class MemorySessionStore:
    """Process-local store; the session is lost on restart."""

    def __init__(self, session: Optional[Session] = None):
        self._session = session

    def load(self) -> Optional[Session]:
        return self._session

    def save(self, session: Session) -> None:
        self._session = session

    def clear(self) -> None:
        self._session = None


class FileSessionStore:
    """Keeps the session in a JSON file so it survives restarts."""

    def __init__(self, path: str | None = None):
        self.path = path or get_env_var("SESSION_FILE", ".dashboard_session.json")

    def load(self) -> Optional[Session]:
        """Read the stored session, discarding it if the file is unusable."""
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return Session.model_validate(data)
        except FileNotFoundError:
            return None
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning("Discarding unreadable session file %s: %s", self.path, e)
            self.clear()
            return None

    def save(self, session: Session) -> None:
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(session.to_wire(), f)
        os.replace(tmp_path, self.path)
        logger.info("Session saved for %s", obfuscate_email(session.user.email))

    def clear(self) -> None:
        try:
            os.remove(self.path)
            logger.info("Session cleared")
        except FileNotFoundError:
            pass
