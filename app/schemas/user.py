# app/schemas/user.py
import uuid
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from fastapi_users import schemas

# Public fields returned on login and GET /user/me
class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: EmailStr
    avatar_url: Optional[str] = None
    theme_color: str
    is_dark_mode: bool
    created_at: Optional[datetime] = None

# Fed to fastapi-users' UserManager.create
class UserCreate(schemas.BaseUserCreate):
    pass

# Body of POST /register and POST /login
class Credentials(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("password")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Password must not be blank")
        return value

# Fields accepted on PUT /user/settings
class UserSettingsUpdate(BaseModel):
    avatar_url: Optional[str] = None
    theme_color: Optional[str] = Field(None, pattern=r"^#(?:[0-9a-fA-F]{3}){1,2}$")
    is_dark_mode: Optional[bool] = None

class RegisterResponse(BaseModel):
    message: str
    user: UserRead

class LoginResponse(BaseModel):
    message: str
    token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserRead

class UserSettingsResponse(BaseModel):
    message: str
    user: UserRead

class Message(BaseModel):
    message: str
