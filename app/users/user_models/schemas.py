# app/users/user_models/schemas.py


from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

# Allowed values as constants
ROLES = Literal["admin", "doctor", "nurse", "assistant"]


# ✅ Request schema for signup
class UserSignup(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=100)
    role: ROLES = "assistant"

    @field_validator("email", mode="before")
    def normalize_email(cls, v):
        # sourcery skip: assign-if-exp, reintroduce-else
        if isinstance(v, str):
            return v.strip().lower()
        return v


# ✅ User login request
class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., max_length=100)

    @field_validator("email", mode="before")
    def normalize_email(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


# ✅ Public user fields (never the hash)
class UserResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    email: str
    role: ROLES
    created_at: Optional[datetime] = None


# ✅ Response schema for signup
class UserSignupResponse(BaseModel):
    message: str
    user: UserResponse


# ✅ Response schema for login
class UserLoginResponse(BaseModel):
    message: str
    user: UserResponse


# ✅ Response schema for current user
class UserMeResponse(BaseModel):
    user: UserResponse


# ✅ Response schema for logout
class UserLogoutResponse(BaseModel):
    message: str
