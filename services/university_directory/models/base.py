# services/university_directory/models/base.py
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer


class AuditMixin:
    """Columns shared by every table: identity, timestamps and the soft-delete flag"""

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, onupdate=datetime.utcnow, nullable=True)
    is_deleted = Column(Boolean, default=False, nullable=False)
