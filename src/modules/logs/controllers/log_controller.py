from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from modules.auth.dependencies import get_current_principal
from modules.auth.schemas.auth_schemas import Principal
from modules.logs.schemas.log_schemas import LogResponse
from modules.logs.services.log_service import DEFAULT_LOG_PAGE, LogService

router = APIRouter(prefix="/api/logs", tags=["logs"])

@router.get("", response_model=List[LogResponse])
def list_logs(
    limit: int = Query(DEFAULT_LOG_PAGE, ge=1, le=500),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Audit trail, newest first (IT only)"""
    return LogService.list_logs(db, principal, limit)
