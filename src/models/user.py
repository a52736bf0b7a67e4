"""User database model.

This module defines the User database model using SQLAlchemy.
"""

from sqlalchemy import Column, Date, DateTime, Integer, String
from .base import Base


class SysUserModel(Base):
    """User database model."""

    __tablename__ = "sys_user"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    name = Column(String(64), unique=True, index=True, nullable=False)
    password = Column(String(128), nullable=False)  # bcrypt hash
    sex = Column(String(8), nullable=True)
    birth_date = Column(Date, nullable=True)
    department = Column(String(128), nullable=True)
    telephone = Column(String(32), nullable=True)
    email = Column(String(128), nullable=True)
    role = Column(String(32), nullable=True)  # 'ADMIN' or 'USER'
    create_time = Column(DateTime(timezone=True), nullable=False)
