# app/database/models/group.py
from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from ..base import Base
from .mixins import TimestampMixin

class Group(TimestampMixin, Base):
    __tablename__ = "groups"
    
    id = Column(Integer, primary_key=True, index=True)
    speciality_code = Column(Integer, nullable=False)  # 0-999, shown zero-padded
    speciality_name = Column(String, nullable=False, index=True)
    
    # Relationships (no cascade: deleting a group leaves its students dangling)
    students = relationship("Student", back_populates="group")
