# agentchat/models/message.py
from enum import Enum

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from agentchat.models.base import Base, new_id, utcnow


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class Message(Base):
    """One immutable turn half. Rows are only ever inserted."""
    __tablename__ = "messages"
    __table_args__ = (
        CheckConstraint("role IN ('user', 'assistant')", name="ck_messages_role"),
    )
    
    id = Column(String, primary_key=True, index=True, default=new_id)  # UUID as string
    conversation_id = Column(String, ForeignKey("conversations.id"), nullable=False, index=True)
    role = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    
    # Relationship
    conversation = relationship("Conversation", back_populates="messages")
