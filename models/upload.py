# models/upload.py
from sqlalchemy import Column, BigInteger, DateTime, ForeignKey, Integer, String
from sqlalchemy.sql import func

from .base import Base, utcnow


class Upload(Base):
    """A file stored through /api/uploads; post media and avatars have no row here."""
    __tablename__ = "uploads"

    id = Column(BigInteger, primary_key=True, index=True)
    file_id = Column(String(64), unique=True, index=True, nullable=False)
    user_id = Column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    name = Column(String(255), nullable=False)
    mime_type = Column(String(100), nullable=True)
    size = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Upload {self.file_id} user={self.user_id}>"
