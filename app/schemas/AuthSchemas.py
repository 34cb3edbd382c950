import re
from typing import Optional

import pydantic
from pydantic import BaseModel

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
SPECIAL_CHARS = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")


def _normalize_email(v: str) -> str:
    v = (v or "").strip().lower()
    if not EMAIL_PATTERN.match(v):
        raise ValueError("Please provide a valid email address")
    if len(v) > 255:
        raise ValueError("Email must not exceed 255 characters")
    return v


class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str

    @pydantic.field_validator("name")
    @classmethod
    def _check_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters long")
        if len(v) > 100:
            raise ValueError("Name must not exceed 100 characters")
        return v

    @pydantic.field_validator("email")
    @classmethod
    def _check_email(cls, v: str) -> str:
        return _normalize_email(v)

    @pydantic.field_validator("password")
    @classmethod
    def _check_password(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters long")
        if len(v) > 128:
            raise ValueError("Password must not exceed 128 characters")
        if not (
            re.search(r"[A-Z]", v)
            and re.search(r"[a-z]", v)
            and re.search(r"[0-9]", v)
            and SPECIAL_CHARS.search(v)
        ):
            raise ValueError(
                "Password must contain at least one uppercase letter, one lowercase letter, "
                "one number, and one special character"
            )
        return v


class LoginRequest(BaseModel):
    email: str
    password: str

    @pydantic.field_validator("email")
    @classmethod
    def _check_email(cls, v: str) -> str:
        return _normalize_email(v)


class ProfilePictureRequest(BaseModel):
    # null clears the picture
    profilePictureUrl: Optional[str] = None
    publicId: Optional[str] = None


class AccountProfile(BaseModel):
    id: int
    name: Optional[str] = None
    email: str
    profile_picture: Optional[str] = None
    profile_picture_public_id: Optional[str] = None


class RegisterResponse(BaseModel):
    message: str
    userId: int


class LoginUser(BaseModel):
    id: int
    name: Optional[str] = None
    email: str


class LoginResponse(BaseModel):
    token: str
    user: LoginUser


class ProfileResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    user: AccountProfile
