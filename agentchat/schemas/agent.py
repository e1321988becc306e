# agentchat/schemas/agent.py
from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional

from agentchat.models.base import as_utc

class AgentResponse(BaseModel):
    id: str
    name: str
    short_description: Optional[str] = None
    system_prompt: str
    image_url: Optional[str] = None
    is_enabled: bool
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime

class AgentSummary(BaseModel):
    id: str
    name: str
    short_description: Optional[str] = None
    image_url: Optional[str] = None

class AgentCreate(BaseModel):
    name: str = Field(..., min_length=1)
    short_description: Optional[str] = None
    system_prompt: str = Field(..., min_length=1)
    image_url: Optional[str] = None
    is_enabled: bool = True

class AgentUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    short_description: Optional[str] = None
    system_prompt: Optional[str] = Field(None, min_length=1)
    image_url: Optional[str] = None
    is_enabled: Optional[bool] = None

def agent_response(agent) -> AgentResponse:
    return AgentResponse(
        id=agent.id,
        name=agent.name,
        short_description=agent.short_description,
        system_prompt=agent.system_prompt,
        image_url=agent.image_url,
        is_enabled=agent.is_enabled,
        created_by=agent.created_by,
        created_at=as_utc(agent.created_at),
        updated_at=as_utc(agent.updated_at),
    )

def agent_summary(agent) -> AgentSummary:
    return AgentSummary(
        id=agent.id,
        name=agent.name,
        short_description=agent.short_description,
        image_url=agent.image_url,
    )
