from sqlalchemy import Column, Integer, String
from database import Base

class Division(Base):
    __tablename__ = 'divisions'

    id = Column(Integer, primary_key=True)
    name = Column(String(100), unique=True, nullable=False)
    code = Column(String(10), unique=True, nullable=False)

class Branch(Base):
    __tablename__ = 'branches'

    id = Column(Integer, primary_key=True)
    name = Column(String(100), unique=True, nullable=False)
