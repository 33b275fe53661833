from datetime import datetime
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional
from schemas.product import MAX_INT

# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

# Schema for user authentication credentials
class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

# Schema for user registration requests
class UserCreate(BaseModel):
    fullname: str = Field(min_length=1)
    username: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=1)
    password_confirmation: Optional[str] = None
    tel: str = Field(min_length=1)
    role: int = Field(ge=-MAX_INT - 1, le=MAX_INT)

# Output schema for user profile details; the password hash never leaves the server
class UserResponse(ORMBase):
    id: int
    fullname: str
    username: str
    email: str
    tel: str
    avatar: Optional[str] = None
    role: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class RegisterResponse(BaseModel):
    status: bool = True
    message: str
    user: UserResponse

# Login and refresh both hand back the user with a fresh plaintext token
class TokenResponse(BaseModel):
    status: bool = True
    message: str
    user: UserResponse
    token: str

class MessageResponse(BaseModel):
    status: bool = True
    message: str
