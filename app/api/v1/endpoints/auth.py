"""Auth API: login and current user.

Uses only injected dependencies (get_user_repo, get_auth_security); JWT
created via infrastructure security.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request

from app.api.v1.dependencies import (
    AuthSecurity,
    get_auth_security,
    get_current_user,
    get_user_repo,
)
from app.application.dtos.user import UserResult
from app.core.limiter import limit_auth
from app.infrastructure.persistence.repositories.user_repo import UserRepository
from app.schemas.auth import LoginRequest, TokenResponse
from app.schemas.user import UserResponse

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
@limit_auth
async def login(
    request: Request,
    body: LoginRequest,
    user_repo: Annotated[UserRepository, Depends(get_user_repo)],
    auth_security: Annotated[AuthSecurity, Depends(get_auth_security)],
):
    """Authenticate with email and password; return JWT."""
    user = await user_repo.authenticate(body.email, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return TokenResponse(
        access_token=auth_security.create_access_token(user.id),
        user_id=user.id,
        is_admin=user.is_admin,
        should_change_password=user.should_change_password,
    )


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: Annotated[UserResult, Depends(get_current_user)],
):
    """Return the currently authenticated user. Requires Authorization: Bearer <token>."""
    return UserResponse.from_result(current_user)
