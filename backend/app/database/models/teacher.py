# app/database/models/teacher.py
from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from ..base import Base
from .mixins import TimestampMixin

class Teacher(TimestampMixin, Base):
    __tablename__ = "teachers"
    
    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False, index=True)
    
    grades = relationship("Grade", back_populates="teacher")
