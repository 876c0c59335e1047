"""Authentication API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from task_manager.api.dependencies import get_current_user, get_token_service
from task_manager.database import get_db
from task_manager.exceptions import InvalidCredentials
from task_manager.models.user import User
from task_manager.schemas.auth import (
    LoginResponse,
    RegisterResponse,
    UserLogin,
    UserRegister,
    UserResponse,
)
from task_manager.services.auth import authenticate_user, create_user
from task_manager.services.tokens import TokenService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
):
    """Register a new user."""
    user = create_user(db, user_data.name, user_data.email, user_data.password)

    return RegisterResponse(
        user=UserResponse.model_validate(user),
        token=tokens.issue(user.id),
    )


@router.post("/login", response_model=LoginResponse)
def login(
    credentials: UserLogin,
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
):
    """Login with email and password."""
    user = authenticate_user(db, credentials.email, credentials.password)

    if not user:
        logger.warning("Failed login attempt")
        raise InvalidCredentials()

    return LoginResponse(token=tokens.issue(user.id))


@router.get("/me", response_model=UserResponse)
def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get current user information."""
    return current_user
