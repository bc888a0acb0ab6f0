# app/database/models/grade.py
from sqlalchemy import Column, Integer, ForeignKey, Text
from sqlalchemy.orm import relationship
from ..base import Base
from .mixins import TimestampMixin

class Grade(TimestampMixin, Base):
    __tablename__ = "grades"
    
    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False)
    teacher_id = Column(Integer, ForeignKey("teachers.id"), nullable=False)
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False)
    grade = Column(Integer, nullable=False)  # 0-100
    note = Column(Text, nullable=True)
    
    # Relationships
    student = relationship("Student", back_populates="grades")
    teacher = relationship("Teacher", back_populates="grades")
    subject = relationship("Subject", back_populates="grades")
