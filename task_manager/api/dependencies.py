"""FastAPI dependencies for authentication and services."""

import logging
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from task_manager.database import get_db
from task_manager.exceptions import InvalidToken, TokenError, TokenExpired, Unauthenticated
from task_manager.models.user import User
from task_manager.services.auth import get_user_by_id
from task_manager.services.task_service import TaskService
from task_manager.services.tokens import TokenService

logger = logging.getLogger(__name__)

# auto_error is off so a missing header is reported as Unauthenticated, not FastAPI's 403
security = HTTPBearer(auto_error=False)


def get_token_service(request: Request) -> TokenService:
    """Get the token service built at startup."""
    return request.app.state.token_service


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from the bearer token.

    The user is looked up again on every request, so a token that outlives
    its account is rejected.
    """
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()

    try:
        claims = tokens.verify(credentials.credentials)
    except TokenExpired:
        logger.info("Rejected expired token")
        raise InvalidToken("Token has expired") from None
    except TokenError as e:
        logger.info(f"Rejected invalid token: {e}")
        raise InvalidToken("Invalid token") from None

    user = get_user_by_id(db, claims.user_id)
    if user is None:
        logger.info(f"Rejected token for missing user {claims.user_id}")
        raise InvalidToken("Invalid token. User not found.")

    return user


def get_task_service(
    db: Annotated[Session, Depends(get_db)],
) -> TaskService:
    """Get task service with dependencies."""
    return TaskService(db)
