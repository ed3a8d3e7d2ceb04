from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_db
from modules.auth.dependencies import get_client_ip, get_current_principal
from modules.auth.schemas.auth_schemas import Principal
from modules.maintenance.schemas.maintenance_schemas import (
    MaintenanceCreate, MaintenanceDetailResponse, MaintenanceResponse, MaintenanceUpdate
)
from modules.maintenance.services.maintenance_service import MaintenanceService
from modules.uploads.schemas.upload_schemas import FileUploadResponse

router = APIRouter(prefix="/api/maintenance", tags=["maintenance"])

@router.get("", response_model=List[MaintenanceResponse])
def list_issues(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return MaintenanceService.list_issues(db, principal)

@router.post("", response_model=MaintenanceResponse, status_code=status.HTTP_201_CREATED)
def create_issue(
    payload: MaintenanceCreate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
    ip: str = Depends(get_client_ip),
):
    return MaintenanceService.create_issue(db, principal, payload, ip=ip)

@router.get("/{issue_id}", response_model=MaintenanceDetailResponse)
def get_issue(
    issue_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    issue, attachments = MaintenanceService.get_issue(db, principal, issue_id)
    detail = MaintenanceDetailResponse.model_validate(issue)
    detail.attachments = [FileUploadResponse.model_validate(f) for f in attachments]
    return detail

@router.patch("/{issue_id}", response_model=MaintenanceResponse)
def update_issue(
    issue_id: int,
    payload: MaintenanceUpdate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
    ip: str = Depends(get_client_ip),
):
    return MaintenanceService.update_issue(db, principal, issue_id, payload, ip=ip)

@router.delete("/{issue_id}")
def delete_issue(
    issue_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
    ip: str = Depends(get_client_ip),
):
    MaintenanceService.delete_issue(db, principal, issue_id, ip=ip)
    return {"success": True}
