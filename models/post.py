# models/post.py
from sqlalchemy import Column, BigInteger, DateTime, ForeignKey, JSON, String, Text
from sqlalchemy.sql import func

from .base import Base, utcnow


class Post(Base):
    __tablename__ = "posts"

    id = Column(BigInteger, primary_key=True, index=True)
    creator_id = Column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    caption = Column(Text, nullable=False, default="")
    location = Column(String(255), nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    image_urls = Column(JSON, nullable=False, default=list)
    image_ids = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self):
        return f"<Post id={self.id} creator={self.creator_id}>"
