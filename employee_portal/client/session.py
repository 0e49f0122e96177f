"""
Client-side authentication state.

A ClientSession is created on login and handed to every API call; it is
cleared on logout or when the server rejects the token. SessionStore keeps
it between CLI invocations.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger("employee_portal.client.session")


@dataclass
class ClientSession:
    base_url: str
    token: Optional[str] = None
    user: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def start(self, token: str, user: Dict[str, Any]) -> None:
        self.token = token
        self.user = dict(user)

    def clear(self) -> None:
        self.token = None
        self.user = {}

    def auth_headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def to_dict(self) -> Dict[str, Any]:
        return {"base_url": self.base_url, "token": self.token, "user": self.user}


class SessionStore:
    """JSON file holding one ClientSession, readable by the owner only."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self, base_url: str) -> ClientSession:
        """
        Return the stored session for base_url, or an empty one.

        A session saved for another server is ignored.
        """
        if not self.path.exists():
            return ClientSession(base_url=base_url)
        try:
            data = json.loads(self.path.read_text())
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return ClientSession(base_url=base_url)

        if data.get("base_url") != base_url:
            return ClientSession(base_url=base_url)
        return ClientSession(
            base_url=base_url,
            token=data.get("token"),
            user=data.get("user") or {},
        )

    def save(self, session: ClientSession) -> None:
        if not session.is_authenticated:
            self.clear()
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(session.to_dict()))
        os.chmod(self.path, 0o600)

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
