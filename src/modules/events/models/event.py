from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from enum import Enum as PyEnum
from database import Base

class EventType(PyEnum):
    CUSTOM = "custom"
    DEADLINE_MAINTENANCE = "deadline_maintenance"
    DEADLINE_PROJECT = "deadline_project"

    @property
    def is_deadline(self) -> bool:
        return self != EventType.CUSTOM

class Event(Base):
    __tablename__ = 'events'

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    color = Column(String(30), nullable=False, default="blue")
    event_type = Column(Enum(EventType, values_callable=lambda e: [m.value for m in e]),
                        nullable=False, default=EventType.CUSTOM)
    # Source maintenance issue / project id for deadline events
    reference_id = Column(Integer, nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    user_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    user = relationship("User")
