# models/contact_request.py
from sqlalchemy import Column, BigInteger, DateTime, String, Text
from sqlalchemy.sql import func

from .base import Base, utcnow


class ContactRequest(Base):
    __tablename__ = "contact_requests"

    id = Column(BigInteger, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<ContactRequest id={self.id} email={self.email}>"
