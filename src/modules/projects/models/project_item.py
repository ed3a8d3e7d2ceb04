from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from enum import Enum as PyEnum
from database import Base

class ProjectStatus(PyEnum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    REJECTED = "REJECTED"

class ResultType(PyEnum):
    LINK = "LINK"
    FILE = "FILE"

class ProjectItem(Base):
    __tablename__ = 'project_items'

    id = Column(Integer, primary_key=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    file_or_link = Column(String(1024), nullable=True)
    status = Column(Enum(ProjectStatus), nullable=False, default=ProjectStatus.PENDING)
    deadline = Column(Date, nullable=True)

    # Filled in when IT marks the project COMPLETED
    result_type = Column(Enum(ResultType), nullable=True)
    result_value = Column(String(1024), nullable=True)
    result_name = Column(String(255), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    user = relationship("User", back_populates="projects")
