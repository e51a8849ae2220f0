from pydantic import BaseModel, EmailStr, Field
from helpmate.models import Role, User


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=1)
    role: Role = Role.USER


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class AuthResult(BaseModel):
    token: str
    user: User
