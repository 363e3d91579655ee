"""
User model for BorderWatch.

This module provides the SQLAlchemy model for civilian and admin accounts.
"""

import enum
from datetime import datetime
from sqlalchemy import Column, String, Integer, Boolean, DateTime, Enum

from borderwatch.core.database import Base


class UserRole(str, enum.Enum):
    """Enumeration of user roles."""
    USER = "user"
    ADMIN = "admin"


class User(Base):
    """
    User model representing a dashboard account.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    username = Column(String(100), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=False)
    phone_number = Column(String(50), nullable=True)
    location = Column(String(255), nullable=True)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.USER)
    is_verified = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self):
        return f"<User {self.id}: {self.username}>"
