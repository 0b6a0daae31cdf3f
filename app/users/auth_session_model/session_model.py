# app/users/auth_session_model/session_model.py
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.database.connection import Base
from app.helpers.time import as_utc, utcnow


class Session(Base):
    __tablename__ = "sessions"

    # The token itself is the key; it is what the browser holds in its cookie
    id = Column(String(64), primary_key=True)
    user_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    user = relationship("User", back_populates="sessions", lazy="joined")

    def is_expired(self) -> bool:
        return as_utc(self.expires_at) <= utcnow()

    def __repr__(self):
        return f"<Session(user_id={self.user_id}, expires_at={self.expires_at})>"
