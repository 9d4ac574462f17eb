from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from .config import MIN_PASSWORD_LENGTH


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class User(BaseModel):
    id: int
    email: str
    verified: bool = False
    created_at: datetime


class UserEnvelope(BaseModel):
    user: User


class AuthResponse(BaseModel):
    message: str
    user: Optional[User] = None


class MessageResponse(BaseModel):
    message: str = ""
