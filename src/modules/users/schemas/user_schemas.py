from typing import Optional
from pydantic import BaseModel
from modules.users.models.user import UserRole

class OwnerSummary(BaseModel):
    id: int
    nama_lengkap: str
    email: str
    divisi: str
    cabang: str
    nomor_id: str

    model_config = {"from_attributes": True}

class ProfileResponse(BaseModel):
    id: int
    nama_lengkap: str
    email: str
    nomor_id: str
    divisi: str
    cabang: str
    role: UserRole
    profile_picture: Optional[str] = None

    model_config = {"from_attributes": True}

class ProfileUpdate(BaseModel):
    nama_lengkap: Optional[str] = None
    # Explicit null clears the picture
    profile_picture: Optional[str] = None
