# agentchat/routers/agents.py
import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from agentchat.core import store
from agentchat.core.database import get_db
from agentchat.core.errors import NotFound, to_http_exception
from agentchat.core.session import SessionContext, get_session, require_admin
from agentchat.models.agent import Agent
from agentchat.schemas.agent import AgentCreate, AgentResponse, AgentUpdate, agent_response

logger = logging.getLogger(__name__)

router = APIRouter()

def _load_agent(db: Session, agent_id: str, enabled_only: bool = False) -> Agent:
    try:
        return store.get_agent(db, agent_id, enabled_only=enabled_only)
    except NotFound as exc:
        raise to_http_exception(exc)

@router.get("", response_model=List[AgentResponse])
def list_agents(session: SessionContext = Depends(get_session), db: Session = Depends(get_db)):
    """
    List agents, newest first. Disabled agents are only listed for admins.
    """
    agents = store.list_agents(db, include_disabled=session.is_admin)
    return [agent_response(agent) for agent in agents]

@router.get("/{agent_id}", response_model=AgentResponse)
def get_agent(agent_id: str, session: SessionContext = Depends(get_session), db: Session = Depends(get_db)):
    return agent_response(_load_agent(db, agent_id, enabled_only=not session.is_admin))

@router.post("", response_model=AgentResponse, status_code=201)
def create_agent(
    payload: AgentCreate,
    session: SessionContext = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Create a new agent.
    
    - **name**: Display name, also used as the speaker label in prompts.
    - **system_prompt**: Persona instructions sent with every turn.
    - **short_description**, **image_url**: Shown in the agent gallery.
    - **is_enabled**: Whether users can see and start chats with the agent.
    """
    new_agent = Agent(
        name=payload.name,
        short_description=payload.short_description,
        system_prompt=payload.system_prompt,
        image_url=payload.image_url,
        is_enabled=payload.is_enabled,
        created_by=session.user_id,
    )
    db.add(new_agent)
    db.commit()
    db.refresh(new_agent)
    logger.info("Agent %s (%s) created by %s", new_agent.id, new_agent.name, session.user_id)
    return agent_response(new_agent)

@router.patch("/{agent_id}", response_model=AgentResponse)
def update_agent(
    agent_id: str,
    payload: AgentUpdate,
    session: SessionContext = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Update any subset of an agent's fields.
    """
    agent = _load_agent(db, agent_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        if field in ("name", "system_prompt", "is_enabled") and value is None:
            continue
        setattr(agent, field, value)
    db.commit()
    db.refresh(agent)
    return agent_response(agent)

@router.post("/{agent_id}/toggle", response_model=AgentResponse)
def toggle_agent(
    agent_id: str,
    session: SessionContext = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Flip an agent between enabled and disabled.
    """
    agent = _load_agent(db, agent_id)
    agent.is_enabled = not agent.is_enabled
    db.commit()
    db.refresh(agent)
    logger.info("Agent %s is_enabled=%s", agent.id, agent.is_enabled)
    return agent_response(agent)
