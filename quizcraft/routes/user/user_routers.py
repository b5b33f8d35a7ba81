from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from quizcraft.core.database import get_db
from quizcraft.models.user_db.user_db_crud import create_user, get_user_by_id, get_user_by_email
from quizcraft.schemas.users.user_base import UserCreate, UserOut


user_router = APIRouter(prefix="/users", tags=["Users"])

EMAIL_TAKEN = "Email already registered"


@user_router.post("/register", response_model=UserOut, status_code=201)
def register_author(user: UserCreate, db: Session = Depends(get_db)):
    if get_user_by_email(db, user.email):
        raise HTTPException(status_code=400, detail=EMAIL_TAKEN)

    created = create_user(db, user)
    if created is None:
        raise HTTPException(status_code=400, detail=EMAIL_TAKEN)
    return created


@user_router.get("/{user_id}", response_model=UserOut)
def get_author(user_id: UUID, db: Session = Depends(get_db)):
    author = get_user_by_id(db, user_id)
    if not author:
        raise HTTPException(status_code=404, detail="User not found")
    return author
