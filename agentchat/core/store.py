# agentchat/core/store.py
"""
Agent registry and conversation store.

Thin accessors over the SQLAlchemy models. Lookups raise NotFound, ownership
checks raise Forbidden, and failed writes are rolled back and re-raised as
PersistenceError.
"""
import logging
from datetime import timedelta
from typing import Dict, List

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from agentchat.core.errors import Forbidden, NotFound, PersistenceError
from agentchat.core.session import SessionContext
from agentchat.models.agent import Agent
from agentchat.models.base import as_utc, utcnow
from agentchat.models.conversation import Conversation
from agentchat.models.message import Message, MessageRole

logger = logging.getLogger(__name__)


def get_agent(db: Session, agent_id: str, enabled_only: bool = False) -> Agent:
    query = db.query(Agent).filter(Agent.id == agent_id)
    if enabled_only:
        query = query.filter(Agent.is_enabled.is_(True))
    agent = query.first()
    if not agent:
        raise NotFound("Agent not found")
    return agent


def list_agents(db: Session, include_disabled: bool = False) -> List[Agent]:
    query = db.query(Agent)
    if not include_disabled:
        query = query.filter(Agent.is_enabled.is_(True))
    return query.order_by(Agent.created_at.desc()).all()


def get_conversation(db: Session, conversation_id: str) -> Conversation:
    conversation = db.query(Conversation).filter(Conversation.id == conversation_id).first()
    if not conversation:
        raise NotFound("Conversation not found")
    return conversation


def ensure_conversation_access(conversation: Conversation, session: SessionContext) -> None:
    """Owners and admins may read or extend a conversation."""
    if conversation.user_id != session.user_id and not session.is_admin:
        raise Forbidden("Access denied")


def load_history(db: Session, conversation_id: str) -> List[Message]:
    """All messages of a conversation, oldest first. Ties on created_at fall back to id."""
    return (
        db.query(Message)
        .filter(Message.conversation_id == conversation_id)
        .order_by(Message.created_at.asc(), Message.id.asc())
        .all()
    )


def append_message(db: Session, conversation: Conversation, role: MessageRole, content: str) -> Message:
    """
    Insert one message and bump the conversation's `updated_at`.

    The timestamp is nudged past the conversation's newest message so a single
    writer always produces a strictly increasing sequence.
    """
    try:
        latest = (
            db.query(func.max(Message.created_at))
            .filter(Message.conversation_id == conversation.id)
            .scalar()
        )
        created_at = utcnow()
        latest = as_utc(latest)
        if latest is not None and created_at <= latest:
            created_at = latest + timedelta(microseconds=1)

        message = Message(
            conversation_id=conversation.id,
            role=role.value,
            content=content,
            created_at=created_at,
        )
        db.add(message)
        conversation.updated_at = created_at
        db.commit()
        db.refresh(message)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to save %s message in conversation %s: %s", role.value, conversation.id, exc)
        raise PersistenceError(f"Failed to save {role.value} message") from exc
    return message


def conversation_summaries(db: Session, user_id: str) -> List[Dict]:
    """
    A user's conversations, most recently updated first, each with its agent,
    message count and the timestamp of its last message.
    """
    conversations = (
        db.query(Conversation)
        .filter(Conversation.user_id == user_id)
        .order_by(Conversation.updated_at.desc())
        .all()
    )
    if not conversations:
        return []

    stats = dict(
        (row.conversation_id, (row.message_count, row.last_message_date))
        for row in db.query(
            Message.conversation_id,
            func.count(Message.id).label("message_count"),
            func.max(Message.created_at).label("last_message_date"),
        )
        .filter(Message.conversation_id.in_([c.id for c in conversations]))
        .group_by(Message.conversation_id)
        .all()
    )

    summaries = []
    for conversation in conversations:
        message_count, last_message_date = stats.get(conversation.id, (0, None))
        summaries.append({
            "conversation": conversation,
            "agent": conversation.agent,
            "message_count": message_count,
            "last_message_date": as_utc(last_message_date),
        })
    return summaries


def count_recent_active_conversations(db: Session, hours: int = 24) -> int:
    since = utcnow() - timedelta(hours=hours)
    return (
        db.query(func.count(Conversation.id))
        .filter(Conversation.is_active.is_(True), Conversation.updated_at >= since)
        .scalar()
    ) or 0
