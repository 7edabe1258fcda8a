# models/user.py
from sqlalchemy import Column, BigInteger, DateTime, String, Text
from sqlalchemy.orm import validates
from sqlalchemy.sql import func

from .base import Base, utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(BigInteger, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(64), index=True, nullable=True)
    password_hash = Column(String(128), nullable=False)
    image_url = Column(String(512), nullable=False, default="")
    image_id = Column(String(255), nullable=True)
    bio = Column(Text, nullable=False, default="")

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    @validates("email")
    def normalize_email(self, key, value):
        return value.strip().lower() if isinstance(value, str) else value

    @validates("username")
    def normalize_username(self, key, value):
        if isinstance(value, str):
            return value.strip().lower() or None
        return value

    def __repr__(self):
        return f"<User id={self.id} email={self.email}>"
