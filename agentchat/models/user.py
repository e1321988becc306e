# agentchat/models/user.py
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from agentchat.models.base import Base, new_id, utcnow

class User(Base):
    """Sign-in identity. Everything visible to the application lives on Profile."""
    __tablename__ = "users"
    
    id = Column(String, primary_key=True, index=True, default=new_id)   # Use a UUID string
    email = Column(String, unique=True, nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    
    # Relationships
    profile = relationship("Profile", back_populates="user", uselist=False, cascade="all, delete-orphan")
