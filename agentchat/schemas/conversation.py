# agentchat/schemas/conversation.py
from datetime import datetime
from pydantic import BaseModel
from typing import List, Optional

from agentchat.models.message import MessageRole
from agentchat.models.base import as_utc
from agentchat.schemas.agent import AgentSummary, agent_summary

class ConversationCreate(BaseModel):
    agent_id: str
    title: Optional[str] = None

class ConversationResponse(BaseModel):
    id: str
    user_id: str
    agent_id: str
    title: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

class ConversationSummary(ConversationResponse):
    agent: Optional[AgentSummary] = None
    message_count: int = 0
    last_message_date: Optional[datetime] = None

class MessageResponse(BaseModel):
    id: str
    conversation_id: str
    role: MessageRole
    content: str
    created_at: datetime

class ConversationMessages(BaseModel):
    conversation: ConversationResponse
    messages: List[MessageResponse]

def conversation_response(conversation) -> ConversationResponse:
    return ConversationResponse(
        id=conversation.id,
        user_id=conversation.user_id,
        agent_id=conversation.agent_id,
        title=conversation.title,
        is_active=conversation.is_active,
        created_at=as_utc(conversation.created_at),
        updated_at=as_utc(conversation.updated_at),
    )

def conversation_summary(summary: dict) -> ConversationSummary:
    base = conversation_response(summary["conversation"])
    agent = summary["agent"]
    return ConversationSummary(
        **base.model_dump(),
        agent=agent_summary(agent) if agent else None,
        message_count=summary["message_count"],
        last_message_date=summary["last_message_date"],
    )

def message_response(message) -> MessageResponse:
    return MessageResponse(
        id=message.id,
        conversation_id=message.conversation_id,
        role=message.role,
        content=message.content,
        created_at=as_utc(message.created_at),
    )
