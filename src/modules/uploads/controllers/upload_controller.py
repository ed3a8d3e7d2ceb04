from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from modules.auth.dependencies import get_current_principal
from modules.auth.schemas.auth_schemas import Principal
from modules.common.errors import ValidationFailed
from modules.uploads.schemas.upload_schemas import FileUploadResponse
from modules.uploads.services.entity_ref import EntityRef
from modules.uploads.services.upload_service import UploadService

router = APIRouter(prefix="/api/upload", tags=["uploads"])

def _entity_ref(entity_type: Optional[str], entity_id: Optional[str]) -> EntityRef:
    if not entity_type or not entity_id:
        raise ValidationFailed("Entity type and ID are required")
    return EntityRef.parse(entity_type, entity_id)

@router.post("", response_model=FileUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_file(
    file: Optional[UploadFile] = File(None),
    entity_type: Optional[str] = Form(None),
    entity_id: Optional[str] = Form(None),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    if file is None:
        raise ValidationFailed("No file provided")
    ref = _entity_ref(entity_type, entity_id)
    contents = await file.read()
    return UploadService.upload_file(
        db, principal, ref, contents, file.filename or "", file.content_type,
        settings.upload_dir, settings.max_upload_bytes,
    )

@router.get("", response_model=List[FileUploadResponse])
def list_files(
    entity_type: Optional[str] = Query(None),
    entity_id: Optional[str] = Query(None),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return UploadService.list_files(db, _entity_ref(entity_type, entity_id))
