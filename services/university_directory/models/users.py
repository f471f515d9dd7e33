# services/university_directory/models/users.py
from sqlalchemy import Boolean, Column, DateTime, Enum, Index, String

from shared.db import Base
from services.university_directory.models.base import AuditMixin
from services.university_directory.models.enums import UserRole


class User(AuditMixin, Base):
    __tablename__ = "users"

    email = Column(String(200), unique=True, nullable=False)
    password_hash = Column(String, nullable=False)
    full_name = Column(String(200), nullable=True)
    role = Column(Enum(UserRole, name="user_role"), nullable=False, default=UserRole.ADMIN)
    is_active = Column(Boolean, default=True, nullable=False)
    last_login_at = Column(DateTime, nullable=True)

    __table_args__ = (
        Index('idx_user_email_deleted', 'email', 'is_deleted'),  # login lookup
    )
