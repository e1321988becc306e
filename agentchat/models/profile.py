# agentchat/models/profile.py
from enum import Enum

from sqlalchemy import Column, String, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from agentchat.models.base import Base, utcnow


class ProfileRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class Profile(Base):
    __tablename__ = "profiles"
    __table_args__ = (
        CheckConstraint("role IN ('user', 'admin')", name="ck_profiles_role"),
    )
    
    id = Column(String, ForeignKey("users.id"), primary_key=True, index=True)  # Same UUID as the user
    email = Column(String, nullable=False)
    full_name = Column(String, nullable=True)
    role = Column(String, nullable=False, default=ProfileRole.USER.value)
    avatar_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
    
    # Relationships
    user = relationship("User", back_populates="profile")
    conversations = relationship("Conversation", back_populates="owner", cascade="all, delete-orphan")
