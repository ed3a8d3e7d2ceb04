import datetime as dt

import pytest

from conftest import principal
from modules.common.errors import Forbidden, NotFound, ValidationFailed
from modules.events.models.event import Event, EventType
from modules.events.schemas.event_schemas import EventCreate
from modules.events.services.event_service import EventService


def test_it_creates_custom_event_with_default_color(session, admin):
    event = EventService.create_event(
        session, principal(admin), EventCreate(date=dt.date(2026, 2, 10), title=" Rapat IT ")
    )
    assert event.title == "Rapat IT"
    assert event.color == "blue"
    assert event.event_type == EventType.CUSTOM


def test_staff_cannot_create_events(session, staff):
    with pytest.raises(Forbidden):
        EventService.create_event(session, principal(staff), EventCreate(date=dt.date(2026, 2, 10), title="Rapat"))


def test_create_requires_title(session, admin):
    with pytest.raises(ValidationFailed):
        EventService.create_event(session, principal(admin), EventCreate(date=dt.date(2026, 2, 10), title=" "))


def test_list_is_shared_and_ordered_by_date(session, admin, staff):
    EventService.create_event(session, principal(admin), EventCreate(date=dt.date(2026, 3, 1), title="B"))
    EventService.create_event(session, principal(admin), EventCreate(date=dt.date(2026, 1, 1), title="A"))
    assert [e.title for e in EventService.list_events(session)] == ["A", "B"]


def test_delete_custom_event(session, admin):
    event = EventService.create_event(session, principal(admin), EventCreate(date=dt.date(2026, 2, 10), title="Rapat"))
    EventService.delete_event(session, principal(admin), event.id)
    assert session.query(Event).count() == 0
    with pytest.raises(NotFound):
        EventService.delete_event(session, principal(admin), event.id)


def test_deadline_event_cannot_be_deleted_directly(session, admin, staff):
    event = EventService.create_deadline_event(
        session, EventType.DEADLINE_MAINTENANCE, 1, staff.id, "Printer jam", dt.date(2026, 2, 1)
    )
    with pytest.raises(Forbidden):
        EventService.delete_event(session, principal(admin), event.id)


def test_sync_deadline_collapses_duplicates(session, staff):
    for day in (1, 2):
        EventService.create_deadline_event(
            session, EventType.DEADLINE_PROJECT, 7, staff.id, "Portal", dt.date(2026, 2, day)
        )
    event = EventService.sync_deadline_event(
        session, EventType.DEADLINE_PROJECT, 7, staff.id, "Portal v2", dt.date(2026, 4, 1)
    )
    assert session.query(Event).count() == 1
    assert event.title == "Deadline: Portal v2"
    assert event.date == dt.date(2026, 4, 1)
