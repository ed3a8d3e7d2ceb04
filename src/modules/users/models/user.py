from sqlalchemy import Column, Integer, String, Enum, DateTime, Text
from sqlalchemy.orm import relationship
from enum import Enum as PyEnum
from datetime import datetime
from database import Base

class UserRole(PyEnum):
    IT = "IT"
    NON_IT = "NON_IT"

class User(Base):
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True)
    nomor_id = Column(String(50), unique=True, nullable=False)
    nama_lengkap = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    divisi = Column(String(100), nullable=False)
    cabang = Column(String(100), nullable=False)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.NON_IT)
    profile_picture = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    maintenance_issues = relationship("MaintenanceIssue", back_populates="user")
    projects = relationship("ProjectItem", back_populates="user")

    notifications = relationship(
        "Notification",
        back_populates="user",
        cascade="all, delete-orphan"
    )

    @property
    def is_it(self) -> bool:
        return self.role == UserRole.IT
