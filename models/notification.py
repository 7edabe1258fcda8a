# models/notification.py
from sqlalchemy import Column, BigInteger, Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.sql import func

from .base import Base, utcnow

NOTIFICATION_TYPES = ("message", "comment", "comment-like", "post-like", "follow", "unfollow")


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(BigInteger, primary_key=True, index=True)
    user_id = Column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    sender_id = Column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    type = Column(String(20), nullable=False)
    related_id = Column(String(64), nullable=True)
    reference_id = Column(String(64), nullable=True)
    content = Column(Text, nullable=True)
    is_read = Column(Boolean, default=False, nullable=False)
    sender_name = Column(String(100), nullable=True)
    sender_image_url = Column(String(512), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Notification {self.type} {self.sender_id}→{self.user_id}>"
