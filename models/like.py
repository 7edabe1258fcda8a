# models/like.py
from sqlalchemy import Column, BigInteger, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func

from .base import Base, utcnow


class Like(Base):
    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint("user_id", "post_id", name="uq_likes_user_post"),
        UniqueConstraint("user_id", "comment_id", name="uq_likes_user_comment"),
    )

    id = Column(BigInteger, primary_key=True, index=True)
    user_id = Column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    # exactly one of post_id / comment_id is set
    post_id = Column(BigInteger, ForeignKey("posts.id", ondelete="CASCADE"), index=True, nullable=True)
    comment_id = Column(BigInteger, ForeignKey("comments.id", ondelete="CASCADE"), index=True, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    def __repr__(self):
        target = f"post={self.post_id}" if self.post_id else f"comment={self.comment_id}"
        return f"<Like user={self.user_id} {target}>"
