# modules/notifications/controllers/notification_controller.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List

from database import get_db
from modules.auth.dependencies import get_current_principal
from modules.auth.schemas.auth_schemas import Principal
from modules.notifications.repositories.notification_repository import NotificationRepository
from modules.notifications.services.notification_service import DEFAULT_FEED_SIZE, NotificationService
from modules.notifications.models.schemas import MarkAllReadResponse, NotificationResponse

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    repo = NotificationRepository(db)
    return NotificationService(repo)


@router.get(
    "",
    response_model=List[NotificationResponse],
    summary="Latest notifications of the current user"
)
def list_notifications(
    limit: int = Query(DEFAULT_FEED_SIZE, ge=1, le=100),
    principal: Principal = Depends(get_current_principal),
    service: NotificationService = Depends(get_notification_service)
):
    return service.get_notifications(principal.id, limit)


@router.post(
    "/mark-all-read",
    response_model=MarkAllReadResponse,
    summary="Mark every unread notification of the current user as read"
)
def mark_all_notifications_as_read(
    principal: Principal = Depends(get_current_principal),
    service: NotificationService = Depends(get_notification_service)
):
    return MarkAllReadResponse(updated=service.mark_all_as_read(principal))


@router.post("", response_model=MarkAllReadResponse, include_in_schema=False)
def mark_all_notifications_as_read_legacy(
    principal: Principal = Depends(get_current_principal),
    service: NotificationService = Depends(get_notification_service)
):
    return MarkAllReadResponse(updated=service.mark_all_as_read(principal))


@router.patch(
    "/{notification_id}",
    response_model=NotificationResponse,
    summary="Mark a notification as read"
)
def mark_notification_as_read(
    notification_id: int,
    principal: Principal = Depends(get_current_principal),
    service: NotificationService = Depends(get_notification_service)
):
    return service.mark_as_read(principal, notification_id)
