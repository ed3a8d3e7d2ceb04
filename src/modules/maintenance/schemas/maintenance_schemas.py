import datetime as dt
from typing import List, Optional
from pydantic import BaseModel

from modules.maintenance.models.maintenance_issue import MaintenanceStatus
from modules.uploads.schemas.upload_schemas import FileUploadResponse
from modules.users.schemas.user_schemas import OwnerSummary

class MaintenanceCreate(BaseModel):
    kategori: Optional[str] = None
    other_kategori: Optional[str] = None
    jenis_masalah: Optional[str] = None
    deskripsi: Optional[str] = None
    deadline: Optional[dt.date] = None

class MaintenanceUpdate(BaseModel):
    """Owner edits descriptive fields; IT sets status. Only the fields sent are applied."""
    kategori: Optional[str] = None
    other_kategori: Optional[str] = None
    jenis_masalah: Optional[str] = None
    deskripsi: Optional[str] = None
    deadline: Optional[dt.date] = None
    status: Optional[MaintenanceStatus] = None

class MaintenanceResponse(BaseModel):
    id: int
    kategori: str
    other_kategori: Optional[str] = None
    jenis_masalah: str
    deskripsi: str
    status: MaintenanceStatus
    deadline: Optional[dt.date] = None
    user_id: int
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None
    user: Optional[OwnerSummary] = None

    model_config = {"from_attributes": True}

class MaintenanceDetailResponse(MaintenanceResponse):
    attachments: List[FileUploadResponse] = []
