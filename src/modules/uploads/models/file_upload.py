from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from enum import Enum as PyEnum
from database import Base

class EntityType(PyEnum):
    MAINTENANCE = "maintenance"
    PROJECT = "project"
    PROJECT_RESULT = "project_result"

class FileUpload(Base):
    __tablename__ = 'file_uploads'

    id = Column(Integer, primary_key=True)
    entity_type = Column(Enum(EntityType, values_callable=lambda e: [m.value for m in e]), nullable=False)
    entity_id = Column(Integer, nullable=False)
    file_name = Column(String(255), nullable=False)
    file_type = Column(String(255), nullable=False)
    file_size = Column(Integer, nullable=False)
    # Public URL path, e.g. /uploads/maintenance/12_1767225600000_invoice.pdf
    file_path = Column(String(1024), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    uploaded_by_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    uploaded_by = relationship("User")
