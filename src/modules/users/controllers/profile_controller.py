from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from modules.auth.dependencies import get_client_ip, get_current_principal
from modules.auth.schemas.auth_schemas import Principal
from modules.users.schemas.user_schemas import ProfileResponse, ProfileUpdate
from modules.users.services.profile_service import ProfileService

router = APIRouter(prefix="/api/profile", tags=["profile"])

@router.get("", response_model=ProfileResponse)
def get_profile(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return ProfileService.get_profile(db, principal)

@router.patch("", response_model=ProfileResponse)
def update_profile(
    payload: ProfileUpdate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
    ip: str = Depends(get_client_ip),
):
    """Display name and/or profile picture; the session keeps the old name until next login"""
    return ProfileService.update_profile(db, principal, payload, ip=ip)
