# agentchat/models/agent.py
from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from agentchat.models.base import Base, new_id, utcnow

class Agent(Base):
    __tablename__ = "agents"
    
    id = Column(String, primary_key=True, index=True, default=new_id)  # UUID as string
    name = Column(String, nullable=False)
    short_description = Column(String, nullable=True)
    system_prompt = Column(Text, nullable=False)
    image_url = Column(String, nullable=True)
    is_enabled = Column(Boolean, nullable=False, default=True)
    created_by = Column(String, ForeignKey("profiles.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
    
    # Relationship
    conversations = relationship("Conversation", back_populates="agent")
