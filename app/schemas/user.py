from datetime import datetime
from typing import Optional
from pydantic import EmailStr, Field, computed_field
from app.core.permissions import permissions_for
from app.core.security import MIN_PASSWORD_LENGTH
from app.models.user import UserRole
from app.schemas.base import CamelModel


class UserCreate(CamelModel):
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH, max_length=128)
    name: str = Field(min_length=1)


class UserLogin(CamelModel):
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)


class UserUpdate(CamelModel):
    name: str = Field(min_length=1)


class RoleUpdate(CamelModel):
    role: UserRole


class UserSummary(CamelModel):
    id: str
    name: str
    email: str
    role: UserRole


class User(UserSummary):
    last_login_at: Optional[datetime] = None

    @computed_field
    @property
    def permissions(self) -> list[str]:
        return permissions_for(self.role)


class Token(CamelModel):
    success: bool = True
    user: User
    token: str


class UserResponse(CamelModel):
    success: bool = True
    user: User


class UserListResponse(CamelModel):
    success: bool = True
    users: list[User]


class MessageResponse(CamelModel):
    success: bool = True
    message: str
