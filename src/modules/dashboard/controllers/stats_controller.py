from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from modules.auth.dependencies import get_current_principal
from modules.auth.schemas.auth_schemas import Principal
from modules.dashboard.schemas.stats_schemas import DashboardStats
from modules.dashboard.services.stats_service import StatsService

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])

@router.get("/stats", response_model=DashboardStats)
def get_stats(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return StatsService.get_stats(db, principal)
