from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from quizcraft.core.database import get_db
from quizcraft.core.security import create_access_token, get_current_user
from quizcraft.models.user_db.user_db import User
from quizcraft.models.user_db.user_db_crud import authenticate_user
from quizcraft.schemas.login.login_base import LoginRequest, TokenResponse
from quizcraft.schemas.users.user_base import UserOut

auth_router = APIRouter(prefix="/auth", tags=["Auth"])


@auth_router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate_user(db, payload.email, payload.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return TokenResponse(user=UserOut.model_validate(user), token=create_access_token(user.id))


@auth_router.get("/me", response_model=UserOut)
def get_me(current_user: User = Depends(get_current_user)):
    return current_user
