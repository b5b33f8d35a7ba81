import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from quizcraft.core.security import hash_password, verify_password
from quizcraft.models.user_db.user_db import User
from quizcraft.schemas.users.user_base import UserCreate

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def create_user(db: Session, user: UserCreate) -> Optional[User]:
    """Create an account; returns None when the email is already registered."""
    db_user = User(
        email=normalize_email(user.email),
        full_name=user.full_name.strip(),
        hashed_password=hash_password(user.password),
    )
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError:
        # lost a race with a concurrent registration
        db.rollback()
        return None
    db.refresh(db_user)
    logger.info("Registered user %s", db_user.id)
    return db_user


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(func.lower(User.email) == normalize_email(email)).first()


def get_user_by_id(db: Session, user_id: UUID) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.hashed_password):
        logger.info("Failed login attempt")
        return None
    return user
