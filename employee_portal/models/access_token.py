"""
Personal access token model.
Stores hashed bearer tokens issued at login.
"""

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from employee_portal.db.base_class import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AccessToken(Base):
    """
    Bearer token bound to one user.

    - Token is hashed (SHA256) before storage - raw token never stored
    - No expiry: a token lives until it is revoked (deleted) at logout
    - A user may hold several tokens at once (one per login)
    """
    __tablename__ = "personal_access_tokens"

    id = Column(Integer, primary_key=True, index=True)

    # SHA256 hash of the bearer token
    token_hash = Column(String(64), unique=True, nullable=False, index=True)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False, default="auth-token")

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    last_used_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", backref="access_tokens", lazy="joined")

    def touch(self) -> None:
        """Record that the token was just used."""
        self.last_used_at = _utcnow()
