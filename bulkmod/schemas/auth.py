from pydantic import Field

from bulkmod.schemas.base import CamelModel
from bulkmod.schemas.user import UserRead


class LoginRequest(CamelModel):
    email: str
    password: str


class RegisterRequest(CamelModel):
    username: str = Field(min_length=3, max_length=50)
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=6)


class AuthResponse(CamelModel):
    user: UserRead
    token: str


class ProfileResponse(CamelModel):
    user: UserRead
