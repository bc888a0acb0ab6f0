# app/database/models/subject.py
from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from ..base import Base
from .mixins import TimestampMixin

class Subject(TimestampMixin, Base):
    __tablename__ = "subjects"
    
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    
    grades = relationship("Grade", back_populates="subject")
