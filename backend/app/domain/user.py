"""
User Domain Models

The password hash lives only on UserRecord, which never leaves the
service layer; everything returned to clients is a User.
"""
from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field

from app.domain.base import DomainModel


class User(DomainModel):
    id: UUID
    name: str
    email: str
    phone: str = ""
    is_admin: bool = False
    street: str = ""
    apartment: str = ""
    zip: str = ""
    city: str = ""
    country: str = ""


class UserRecord(User):
    """Stored user including the bcrypt hash"""
    password_hash: str

    def public(self) -> User:
        return User(**self.model_dump(exclude={"password_hash"}))


class UserCreate(DomainModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=1)
    phone: str = ""
    is_admin: bool = False
    street: str = ""
    apartment: str = ""
    zip: str = ""
    city: str = ""
    country: str = ""


class UserUpdate(DomainModel):
    """Fields not supplied keep their stored value; no password keeps the stored hash"""
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    phone: Optional[str] = None
    is_admin: Optional[bool] = None
    street: Optional[str] = None
    apartment: Optional[str] = None
    zip: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None


class LoginRequest(DomainModel):
    email: str
    password: str


class LoginResponse(DomainModel):
    user: str
    token: str
