# models/comment.py
from sqlalchemy import Column, BigInteger, DateTime, ForeignKey, String, Text
from sqlalchemy.sql import func

from .base import Base, utcnow


class Comment(Base):
    __tablename__ = "comments"

    id = Column(BigInteger, primary_key=True, index=True)
    post_id = Column(BigInteger, ForeignKey("posts.id", ondelete="CASCADE"), index=True, nullable=False)
    user_id = Column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    text = Column(Text, nullable=False)
    # author snapshot at the time of writing
    user_name = Column(String(100), nullable=True)
    user_image_url = Column(String(512), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Comment id={self.id} post={self.post_id}>"
