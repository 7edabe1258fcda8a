# models/message.py
from sqlalchemy import Column, BigInteger, Boolean, DateTime, ForeignKey, String
from sqlalchemy.sql import func

from .base import Base, utcnow

MAX_CONTENT_LENGTH = 220


class Message(Base):
    __tablename__ = "messages"

    id = Column(BigInteger, primary_key=True, index=True)
    user_id = Column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    recipient_id = Column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    content = Column(String(MAX_CONTENT_LENGTH), nullable=False)
    username = Column(String(64), nullable=True)
    sender_image_url = Column(String(512), nullable=True)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Message {self.user_id}→{self.recipient_id}>"
