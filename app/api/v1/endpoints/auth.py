from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.core import security
from app.models.user import User
from app.services.user_service import UserService
from app.schemas.auth import LoginRequest, RefreshRequest, RegisterRequest, Token
from app.schemas.responses import SuccessResponse
from app.schemas.user import PasswordChange, UserResponse

router = APIRouter()


def _issue_tokens(user: User) -> Token:
    claims = {"sub": str(user.id), "role": user.role.value}
    return Token(
        access_token=security.create_access_token(data=claims),
        refresh_token=security.create_refresh_token(data=claims),
        token_type="bearer",
        role=user.role.value,
        user_id=str(user.id),
        customer_id=user.customer_id,
    )


@router.post("/register", response_model=SuccessResponse[Token], status_code=status.HTTP_201_CREATED)
async def register(
    register_in: RegisterRequest,
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Customer self-registration. A customer id is generated for the new account.
    """
    user = await UserService.register_customer(db, register_in)
    return SuccessResponse(data=_issue_tokens(user), message="User registered successfully")


@router.post("/login", response_model=SuccessResponse[Token])
async def login(
    login_data: LoginRequest,
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Login with email or username.
    Returns JWT access token, refresh token, and user role.
    """
    user = await UserService.authenticate_user(
        db,
        password=login_data.password,
        email=login_data.email,
        username=login_data.username,
    )
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is deactivated",
        )
    return SuccessResponse(data=_issue_tokens(user), message="Login successful")


@router.post("/refresh", response_model=SuccessResponse[Token])
async def refresh_token(
    refresh_in: RefreshRequest,
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Exchange a refresh token for a new token pair.
    """
    payload = security.decode_token(refresh_in.refresh_token)
    if not payload or payload.get("type") != "refresh":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")

    try:
        user_id = UUID(payload.get("sub", ""))
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")

    user = await UserService.get_user_by_id(db, user_id)
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")
    return SuccessResponse(data=_issue_tokens(user), message="Token refreshed")


@router.get("/me", response_model=SuccessResponse[UserResponse])
async def read_me(current_user: User = Depends(deps.get_current_user)) -> Any:
    return SuccessResponse(data=UserResponse.model_validate(current_user))


@router.post("/change-password", response_model=SuccessResponse)
async def change_password(
    password_in: PasswordChange,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user)
) -> Any:
    user = await UserService.change_password(
        db, current_user, password_in.current_password, password_in.new_password
    )
    if not user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect",
        )
    return SuccessResponse(message="Password changed successfully")
