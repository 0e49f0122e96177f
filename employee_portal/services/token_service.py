"""
Bearer token issue / validate / revoke.

Tokens are opaque random strings; only their SHA256 hash is stored. A token
stays valid until revoked, and revoking one token leaves the user's other
tokens untouched.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from employee_portal.core.config import settings
from employee_portal.core.security import create_access_token, hash_access_token
from employee_portal.models.access_token import AccessToken
from employee_portal.models.user import User

logger = logging.getLogger("employee_portal.tokens")


async def issue_token(db: AsyncSession, user: User, name: Optional[str] = None) -> str:
    """
    Create a new token for the user and return its raw value.

    The raw value is not recoverable afterwards.
    """
    new_token = create_access_token()
    db.add(AccessToken(
        token_hash=new_token.digest,
        user_id=user.id,
        name=name or settings.TOKEN_NAME,
    ))
    await db.commit()
    logger.debug(f"Issued access token for user {user.id}")
    return new_token.plain


async def validate_token(db: AsyncSession, raw_token: Optional[str]) -> Optional[AccessToken]:
    """
    Resolve a raw bearer token to its stored record (user eagerly loaded).

    Returns None when the token is missing or unknown.
    """
    if not raw_token:
        return None

    result = await db.execute(
        select(AccessToken).where(AccessToken.token_hash == hash_access_token(raw_token))
    )
    token = result.scalar_one_or_none()
    if token is None:
        return None

    token.touch()
    await db.commit()
    return token


async def revoke_token(db: AsyncSession, token: AccessToken) -> None:
    """Delete this one token."""
    await db.delete(token)
    await db.commit()
    logger.debug(f"Revoked access token {token.id} for user {token.user_id}")
