from pydantic import BaseModel

from quizcraft.schemas.users.user_base import UserOut


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    user: UserOut
    token: str
    token_type: str = "bearer"
