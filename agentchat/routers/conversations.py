# agentchat/routers/conversations.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from agentchat.core import store
from agentchat.core.database import get_db
from agentchat.core.errors import AppError, to_http_exception
from agentchat.core.session import SessionContext, get_session
from agentchat.models.conversation import Conversation
from agentchat.schemas.conversation import (
    ConversationCreate,
    ConversationMessages,
    ConversationResponse,
    ConversationSummary,
    MessageResponse,
    conversation_response,
    conversation_summary,
    message_response,
)

router = APIRouter()

def _load_owned_conversation(db: Session, conversation_id: str, session: SessionContext) -> Conversation:
    try:
        conversation = store.get_conversation(db, conversation_id)
        store.ensure_conversation_access(conversation, session)
    except AppError as exc:
        raise to_http_exception(exc)
    return conversation

@router.post("", response_model=ConversationResponse, status_code=201)
def create_conversation(
    payload: ConversationCreate,
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db)
):
    """
    Start a new conversation between the caller and an enabled agent.
    
    - **agent_id**: The agent to talk to.
    - **title**: Optional; defaults to "Chat with <agent name>".
    """
    try:
        agent = store.get_agent(db, payload.agent_id, enabled_only=True)
    except AppError as exc:
        raise to_http_exception(exc)

    new_conversation = Conversation(
        user_id=session.user_id,
        agent_id=agent.id,
        title=payload.title or f"Chat with {agent.name}",
        is_active=True,
    )
    db.add(new_conversation)
    db.commit()
    db.refresh(new_conversation)
    return conversation_response(new_conversation)

@router.get("", response_model=List[ConversationSummary])
def list_conversations(session: SessionContext = Depends(get_session), db: Session = Depends(get_db)):
    """
    The caller's conversations, most recently updated first, with their agent,
    message count and last message date.
    """
    return [conversation_summary(s) for s in store.conversation_summaries(db, session.user_id)]

@router.get("/{conversation_id}", response_model=ConversationResponse)
def get_conversation(conversation_id: str, session: SessionContext = Depends(get_session), db: Session = Depends(get_db)):
    return conversation_response(_load_owned_conversation(db, conversation_id, session))

@router.get("/{conversation_id}/messages", response_model=ConversationMessages)
def get_conversation_messages(
    conversation_id: str,
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db)
):
    """
    A conversation and all of its messages, oldest first.
    """
    conversation = _load_owned_conversation(db, conversation_id, session)
    messages: List[MessageResponse] = [message_response(m) for m in store.load_history(db, conversation.id)]
    return ConversationMessages(conversation=conversation_response(conversation), messages=messages)
