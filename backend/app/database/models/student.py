# app/database/models/student.py
from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from ..base import Base
from .mixins import TimestampMixin

class Student(TimestampMixin, Base):
    __tablename__ = "students"
    
    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False, index=True)
    group_id = Column(Integer, ForeignKey("groups.id"), nullable=False)
    
    # Relationships
    group = relationship("Group", back_populates="students")
    grades = relationship("Grade", back_populates="student")
