from datetime import date
from typing import List, Optional

import structlog
from sqlalchemy.orm import Session, joinedload

from modules.auth.schemas.auth_schemas import Principal
from modules.auth.services.permission import Action, can_mutate
from modules.common.errors import Forbidden, NotFound, ValidationFailed
from modules.events.models.event import Event, EventType
from modules.events.schemas.event_schemas import EventCreate
from modules.logs.services.log_service import CREATE, LogService

logger = structlog.get_logger(__name__)

DEFAULT_COLOR = "blue"

# Presentation of derived deadline events per source kind
DEADLINE_STYLES = {
    EventType.DEADLINE_MAINTENANCE: ("orange", "Deadline maintenance"),
    EventType.DEADLINE_PROJECT: ("purple", "Deadline project"),
}

class EventService:

    @staticmethod
    def list_events(session: Session) -> List[Event]:
        """All events, shared by every authenticated user"""
        return (
            session.query(Event)
            .options(joinedload(Event.user))
            .order_by(Event.date.asc(), Event.id.asc())
            .all()
        )

    @staticmethod
    def create_event(session: Session, actor: Principal, data: EventCreate, ip: str = "system") -> Event:
        if not can_mutate(actor, Event, Action.CREATE):
            raise Forbidden("Forbidden")
        if not data.date or not data.title or not data.title.strip():
            raise ValidationFailed("Tanggal dan judul wajib diisi")

        event = Event(
            date=data.date,
            title=data.title.strip(),
            description=data.description or "",
            color=data.color or DEFAULT_COLOR,
            event_type=EventType.CUSTOM,
            user_id=actor.id,
        )
        session.add(event)
        session.commit()
        session.refresh(event)

        LogService.record(session, actor.id, CREATE, f"Created event: {event.title}", ip=ip)
        return event

    @staticmethod
    def delete_event(session: Session, actor: Principal, event_id: int, ip: str = "system") -> None:
        event = session.get(Event, event_id)
        if not event:
            raise NotFound("Event not found")
        if not can_mutate(actor, event, Action.DELETE):
            raise Forbidden("Forbidden")

        title = event.title
        session.delete(event)
        session.commit()

        LogService.record(session, actor.id, "event_delete", f"Deleted event: {title}", ip=ip)

    @staticmethod
    def create_deadline_event(
        session: Session,
        event_type: EventType,
        reference_id: int,
        owner_id: int,
        source_title: str,
        deadline: date,
    ) -> Event:
        color, label = DEADLINE_STYLES[event_type]
        event = Event(
            date=deadline,
            title=f"Deadline: {source_title}",
            description=f"{label}: {source_title}",
            color=color,
            event_type=event_type,
            reference_id=reference_id,
            user_id=owner_id,
        )
        session.add(event)
        session.commit()
        session.refresh(event)
        logger.info("deadline_event_created", event_type=event_type.value, reference_id=reference_id)
        return event

    @staticmethod
    def sync_deadline_event(
        session: Session,
        event_type: EventType,
        reference_id: int,
        owner_id: int,
        source_title: str,
        deadline: Optional[date],
    ) -> Optional[Event]:
        """Keeps the derived deadline event in line with its source after an edit"""
        existing = (
            session.query(Event)
            .filter(Event.event_type == event_type, Event.reference_id == reference_id)
            .order_by(Event.id.asc())
            .all()
        )
        if deadline is None:
            EventService.delete_deadline_events(session, event_type, reference_id)
            return None
        if not existing:
            return EventService.create_deadline_event(
                session, event_type, reference_id, owner_id, source_title, deadline
            )

        color, label = DEADLINE_STYLES[event_type]
        event = existing[0]
        event.date = deadline
        event.title = f"Deadline: {source_title}"
        event.description = f"{label}: {source_title}"
        event.color = color
        for duplicate in existing[1:]:
            session.delete(duplicate)
        session.commit()
        session.refresh(event)
        return event

    @staticmethod
    def delete_deadline_events(session: Session, event_type: EventType, reference_id: int) -> int:
        deleted = (
            session.query(Event)
            .filter(Event.event_type == event_type, Event.reference_id == reference_id)
            .delete(synchronize_session=False)
        )
        session.commit()
        return deleted
