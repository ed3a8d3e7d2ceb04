import datetime as dt
from typing import Optional
from pydantic import BaseModel

from modules.events.models.event import EventType

class EventCreate(BaseModel):
    date: Optional[dt.date] = None
    title: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None

class EventCreator(BaseModel):
    id: int
    nama_lengkap: str

    model_config = {"from_attributes": True}

class EventResponse(BaseModel):
    id: int
    date: dt.date
    title: str
    description: str
    color: str
    event_type: EventType
    reference_id: Optional[int] = None
    user_id: int
    created_at: Optional[dt.datetime] = None
    user: Optional[EventCreator] = None

    model_config = {"from_attributes": True}
