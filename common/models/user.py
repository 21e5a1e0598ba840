from sqlalchemy import Boolean, Column, DateTime, String, Text, func
from .base import Base

USER_ROLES = ("SUPER_ADMIN", "ADMIN", "EDITOR", "AUTHOR", "CONTRIBUTOR")


class User(Base):
    __tablename__ = "user"

    id = Column(String(36), primary_key=True)
    email = Column(String(255), nullable=False, unique=True)
    username = Column(String(128), nullable=False, unique=True)
    name = Column(String(255), nullable=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="CONTRIBUTOR")
    avatar = Column(String(512), nullable=True)
    bio = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    last_login_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())
