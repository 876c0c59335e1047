"""Authentication service for password handling and user records."""

import logging

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from task_manager.exceptions import DuplicateEmail, ValidationFailed
from task_manager.models.user import User

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def normalize_email(email: str) -> str:
    """Normalize an email for storage and lookup."""
    return email.strip().lower()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash. Malformed hashes never match."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_user_by_id(db: Session, user_id: int) -> User | None:
    """Get a user by id."""
    return db.query(User).filter(User.id == user_id).first()


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Authenticate a user by email and password."""
    user = get_user_by_email(db, email)
    if not user:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def create_user(db: Session, name: str, email: str, password: str) -> User:
    """Create a new user.

    The unique index on ``users.email`` settles concurrent registrations:
    whichever insert loses the race gets ``DuplicateEmail`` as well.
    """
    name = (name or "").strip()
    email = normalize_email(email or "")
    if not name or not email or not password:
        raise ValidationFailed("Please provide name, email, and password")

    if get_user_by_email(db, email):
        raise DuplicateEmail()

    user = User(name=name, email=email, password_hash=get_password_hash(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info(f"Concurrent registration lost the race for {email}")
        raise DuplicateEmail() from None
    db.refresh(user)
    logger.info(f"Registered user {user.id}")
    return user
