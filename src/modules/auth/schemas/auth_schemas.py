from datetime import datetime
from pydantic import BaseModel, field_validator
from typing import Optional, List
from modules.users.models.user import UserRole

def normalize_email(value):
    """Emails are matched case-insensitively, so they are stored and looked up lowercased"""
    return value.strip().lower() if isinstance(value, str) else value

class Principal(BaseModel):
    """Verified identity carried by the session token"""
    id: int
    role: UserRole
    divisi: str
    cabang: str
    nomor_id: str
    name: str

    @property
    def is_it(self) -> bool:
        return self.role == UserRole.IT

class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value):
        return normalize_email(value)

class RegisterRequest(BaseModel):
    nomor_id: Optional[str] = None
    nama_lengkap: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    divisi: Optional[str] = None
    cabang: Optional[str] = None
    # Accepted so clients sending it do not fail, but never trusted
    role: Optional[str] = None

    @field_validator("nomor_id", "nama_lengkap", "divisi", "cabang")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value):
        return normalize_email(value)

class UserSummary(BaseModel):
    id: int
    email: str
    nama_lengkap: str

    model_config = {"from_attributes": True}

class RegisterResponse(BaseModel):
    message: str
    user: UserSummary

class UserResponse(BaseModel):
    id: int
    nomor_id: str
    nama_lengkap: str
    email: str
    divisi: str
    cabang: str
    role: UserRole
    profile_picture: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

class TokenResponse(BaseModel):
    access_token: str
    token_type: str
    expires_in: int
    user: UserResponse

class DivisionResponse(BaseModel):
    id: int
    name: str
    code: str

    model_config = {"from_attributes": True}

class BranchResponse(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}

