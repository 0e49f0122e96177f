import logging
from typing import AsyncGenerator, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from employee_portal.db.session import AsyncSessionLocal
from employee_portal.models.access_token import AccessToken
from employee_portal.models.user import User
from employee_portal.services.employee_repository import SQLAlchemyEmployeeRepository
from employee_portal.services.employee_service import EmployeeService
from employee_portal.services.token_service import validate_token

logger = logging.getLogger("employee_portal.deps")

# Missing headers are handled below so every failure gets the same 401 body
bearer_scheme = HTTPBearer(auto_error=False)


async def get_db() -> AsyncGenerator:
    async with AsyncSessionLocal() as session:
        yield session


def _unauthenticated() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthenticated.",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_access_token(
    db: AsyncSession = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AccessToken:
    """
    Resolve the request's bearer token to its stored record.

    Raises:
        HTTPException: 401 if the header is absent, not Bearer, or the token is unknown
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise _unauthenticated()

    token = await validate_token(db, credentials.credentials)
    if token is None:
        logger.debug("Rejected unknown bearer token")
        raise _unauthenticated()

    return token


async def get_current_user(
    token: AccessToken = Depends(get_current_access_token),
) -> User:
    """
    Get the user that owns the request's bearer token.
    """
    return token.user


async def get_employee_service(db: AsyncSession = Depends(get_db)) -> EmployeeService:
    return EmployeeService(SQLAlchemyEmployeeRepository(db))
