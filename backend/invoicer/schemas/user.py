"""User schemas used for registration and responses."""

from pydantic import BaseModel, ConfigDict, EmailStr


class UserCreate(BaseModel):
    email: EmailStr
    password: str


class LoginRequest(BaseModel):
    """Payload for login attempts."""

    email: EmailStr
    password: str


class UserRead(BaseModel):
    id: int
    email: EmailStr
    is_admin: bool = False

    model_config = ConfigDict(from_attributes=True)
