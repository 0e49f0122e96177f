import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from employee_portal.api.deps import get_db, get_current_access_token, get_current_user
from employee_portal.core.exceptions import InvalidCredentialsError
from employee_portal.core.rate_limiter import limiter, RateLimits, get_real_client_ip
from employee_portal.models.access_token import AccessToken
from employee_portal.models.user import User
from employee_portal.schemas.auth import LoginRequest, LoginResponse, MessageResponse, UserRead, UserSummary
from employee_portal.services import auth_service
from employee_portal.services.token_service import revoke_token

logger = logging.getLogger("employee_portal.api.auth")

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
@limiter.limit(RateLimits.AUTH_LOGIN)
async def login(
    login_data: LoginRequest,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Exchange email and password for a bearer token.

    Each call issues a new token; tokens from earlier logins stay valid.
    """
    try:
        result = await auth_service.login(db, login_data.email, login_data.password)
    except InvalidCredentialsError:
        logger.warning(f"Failed login attempt from {get_real_client_ip(request)}")
        # Same response whether the email is unknown or the password is wrong
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    return LoginResponse(
        token=result.token,
        user=UserSummary.model_validate(result.user),
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    db: AsyncSession = Depends(get_db),
    token: AccessToken = Depends(get_current_access_token),
) -> Any:
    """
    Revoke the token used for this request. Other tokens of the user stay valid.
    """
    user_id = token.user_id
    await revoke_token(db, token)
    logger.info(f"User {user_id} logged out")
    return MessageResponse(message="Logged out successfully")


@router.get("/user", response_model=UserRead)
async def read_current_user(
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Get current authenticated user.
    """
    return current_user
