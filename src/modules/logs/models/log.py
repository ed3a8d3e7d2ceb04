from sqlalchemy import Column, Integer, String, Text, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from enum import Enum as PyEnum
from database import Base

class LogStatus(PyEnum):
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"

class Log(Base):
    """Append-only audit trail entry"""
    __tablename__ = 'logs'

    id = Column(Integer, primary_key=True)
    type = Column(String(50), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(Enum(LogStatus), nullable=False, default=LogStatus.SUCCESS)
    ip = Column(String(64), nullable=False, default="0.0.0.0")
    timestamp = Column(DateTime, default=datetime.utcnow, index=True)

    user_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    user = relationship("User")
