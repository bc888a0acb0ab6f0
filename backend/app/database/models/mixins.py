# app/database/models/mixins.py
from sqlalchemy import Column, DateTime
from datetime import datetime

class TimestampMixin:
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
