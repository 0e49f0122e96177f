"""
Credential check for the login flow.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from employee_portal.core.exceptions import InvalidCredentialsError
from employee_portal.core.security import burn_password_check, verify_password
from employee_portal.models.user import User
from employee_portal.services.token_service import issue_token

logger = logging.getLogger("employee_portal.auth")


@dataclass
class LoginResult:
    token: str
    user: User


async def find_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Exact-match lookup."""
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def authenticate(db: AsyncSession, email: str, password: str) -> User:
    """
    Return the user owning this email/password pair.

    Unknown email and wrong password raise the same InvalidCredentialsError,
    and both paths run one bcrypt comparison.
    """
    user = await find_user_by_email(db, email)

    if user is None:
        burn_password_check(password)
        raise InvalidCredentialsError()

    if not verify_password(password, user.hashed_password):
        raise InvalidCredentialsError()

    return user


async def login(db: AsyncSession, email: str, password: str) -> LoginResult:
    """Check credentials and issue a fresh token. Older tokens stay valid."""
    user = await authenticate(db, email, password)
    token = await issue_token(db, user)
    logger.info(f"User {user.id} logged in")
    return LoginResult(token=token, user=user)
