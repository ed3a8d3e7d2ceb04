import datetime as dt
from typing import List, Optional
from pydantic import BaseModel

from modules.projects.models.project_item import ProjectStatus, ResultType
from modules.uploads.schemas.upload_schemas import FileUploadResponse
from modules.users.schemas.user_schemas import OwnerSummary

class ProjectCreate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    file_or_link: Optional[str] = None
    deadline: Optional[dt.date] = None

class ProjectUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    file_or_link: Optional[str] = None
    deadline: Optional[dt.date] = None
    status: Optional[ProjectStatus] = None
    # Only read when IT moves the project to COMPLETED
    result_type: Optional[ResultType] = None
    result_value: Optional[str] = None
    result_name: Optional[str] = None

class ProjectResponse(BaseModel):
    id: int
    title: str
    description: str
    file_or_link: Optional[str] = None
    status: ProjectStatus
    deadline: Optional[dt.date] = None
    result_type: Optional[ResultType] = None
    result_value: Optional[str] = None
    result_name: Optional[str] = None
    user_id: int
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None
    user: Optional[OwnerSummary] = None

    model_config = {"from_attributes": True}

class ProjectDetailResponse(ProjectResponse):
    attachments: List[FileUploadResponse] = []
