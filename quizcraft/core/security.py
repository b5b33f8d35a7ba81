import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

from jose import jwt, JWTError
from passlib.context import CryptContext
from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from quizcraft.core.config import settings
from quizcraft.core.database import get_db
from quizcraft.models.user_db.user_db import User

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")

ACCESS_TOKEN_TYPE = "access"


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


# Password hashing
def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password, hashed_password) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


# Token generation
def create_access_token(user_id: UUID, expires_delta: timedelta = None) -> str:
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {
        "sub": str(user_id),
        "type": ACCESS_TOKEN_TYPE,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


# Token verification
def verify_token(token: str) -> UUID:
    """Decode an access token and return the user id it was issued for."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise _unauthorized("Invalid or expired token")

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise _unauthorized("Invalid token type")
    try:
        return UUID(payload.get("sub") or "")
    except ValueError:
        raise _unauthorized("Invalid token payload")


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> User:
    user_id = verify_token(token)
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        # account removed after the token was issued
        logger.info("Token presented for unknown user %s", user_id)
        raise _unauthorized("User no longer exists")
    return user
