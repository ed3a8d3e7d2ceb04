from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from enum import Enum as PyEnum
from database import Base

OTHER_CATEGORY = "Other"

class MaintenanceStatus(PyEnum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    REJECTED = "REJECTED"

class MaintenanceIssue(Base):
    __tablename__ = 'maintenance_issues'

    id = Column(Integer, primary_key=True)
    kategori = Column(String(100), nullable=False)
    other_kategori = Column(String(255), nullable=True)
    jenis_masalah = Column(String(255), nullable=False)
    deskripsi = Column(Text, nullable=False)
    status = Column(Enum(MaintenanceStatus), nullable=False, default=MaintenanceStatus.PENDING)
    deadline = Column(Date, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    user = relationship("User", back_populates="maintenance_issues")
