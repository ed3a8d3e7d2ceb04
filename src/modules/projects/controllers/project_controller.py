from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_db
from modules.auth.dependencies import get_client_ip, get_current_principal
from modules.auth.schemas.auth_schemas import Principal
from modules.projects.schemas.project_schemas import (
    ProjectCreate, ProjectDetailResponse, ProjectResponse, ProjectUpdate
)
from modules.projects.services.project_service import ProjectService
from modules.uploads.schemas.upload_schemas import FileUploadResponse

router = APIRouter(prefix="/api/projects", tags=["projects"])

@router.get("", response_model=List[ProjectResponse])
def list_projects(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return ProjectService.list_projects(db, principal)

@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
def create_project(
    payload: ProjectCreate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
    ip: str = Depends(get_client_ip),
):
    return ProjectService.create_project(db, principal, payload, ip=ip)

@router.get("/{project_id}", response_model=ProjectDetailResponse)
def get_project(
    project_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    project, attachments = ProjectService.get_project(db, principal, project_id)
    detail = ProjectDetailResponse.model_validate(project)
    detail.attachments = [FileUploadResponse.model_validate(f) for f in attachments]
    return detail

@router.patch("/{project_id}", response_model=ProjectResponse)
def update_project(
    project_id: int,
    payload: ProjectUpdate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
    ip: str = Depends(get_client_ip),
):
    return ProjectService.update_project(db, principal, project_id, payload, ip=ip)

@router.delete("/{project_id}")
def delete_project(
    project_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
    ip: str = Depends(get_client_ip),
):
    ProjectService.delete_project(db, principal, project_id, ip=ip)
    return {"success": True}
