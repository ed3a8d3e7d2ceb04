from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_db
from modules.auth.dependencies import get_client_ip, get_current_principal
from modules.auth.schemas.auth_schemas import Principal
from modules.events.schemas.event_schemas import EventCreate, EventResponse
from modules.events.services.event_service import EventService

router = APIRouter(prefix="/api/events", tags=["events"])

@router.get("", response_model=List[EventResponse])
def list_events(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return EventService.list_events(db)

@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
def create_event(
    payload: EventCreate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
    ip: str = Depends(get_client_ip),
):
    """Custom calendar event (IT only)"""
    return EventService.create_event(db, principal, payload, ip=ip)

@router.delete("/{event_id}")
def delete_event(
    event_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
    ip: str = Depends(get_client_ip),
):
    EventService.delete_event(db, principal, event_id, ip=ip)
    return {"success": True}
