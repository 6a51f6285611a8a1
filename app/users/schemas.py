from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.constants import Role, PASSWORD_MIN_LENGTH
from app.schemas import CamelModel


# -------- USERS --------
class UserSchema(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH)
    role: Role = Role.EMPLOYEE
    admin_secret: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Please add a name")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class LoginSchema(CamelModel):
    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class UserDisplaySchema(CamelModel):
    id: int
    name: str
    email: str
    role: Role
    created_at: Optional[datetime] = None


class UserBrief(CamelModel):
    """What an expense or budget shows about the people attached to it."""

    id: int
    name: str
    email: str


class AuthResponse(CamelModel):
    success: bool = True
    token: str
    user: UserDisplaySchema


class UserResponse(CamelModel):
    success: bool = True
    user: UserDisplaySchema


# OAuth2 token responses keep the standard snake_case keys
class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
