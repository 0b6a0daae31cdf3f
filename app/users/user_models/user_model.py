# app/users/user_models/user_model.py
import uuid

from sqlalchemy import Column, String, DateTime, CheckConstraint
from sqlalchemy.orm import relationship

from app.database.connection import Base
from app.helpers.time import utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String(20), default="assistant", nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    sessions = relationship("Session", back_populates="user", cascade="all, delete-orphan")

    # Add check constraints for validation at database level
    __table_args__ = (
        CheckConstraint(
            "role IN ('admin', 'doctor', 'nurse', 'assistant')", name="check_role_values"
        ),
    )

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
