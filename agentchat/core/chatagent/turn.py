import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from agentchat.core import config
from agentchat.core import store
from agentchat.core.errors import NotFound, UpstreamError, ValidationError
from agentchat.core.session import SessionContext
from agentchat.models.base import as_utc
from agentchat.models.message import MessageRole

from .llm import ReplyGenerator
from .prompt import build_prompt, error_reply, fallback_reply

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChatTurnResult:
    message: str
    message_id: str
    timestamp: datetime
    generated: bool


def handle_chat_turn(
    db: Session,
    session: SessionContext,
    generator: ReplyGenerator,
    message: str,
    conversation_id: str,
    agent_id: str,
    error_specific_fallback: bool = False,
) -> ChatTurnResult:
    """
    Run one chat turn: persist the user message, generate a reply from the
    agent's persona and the conversation so far, persist the reply.

    Any failure before the reply is generated aborts the turn and propagates.
    A failed generation is replaced with a scripted apology, so once the user
    message is stored the turn always produces an assistant message.
    With `error_specific_fallback` the apology names the kind of failure;
    otherwise it depends on whether the conversation history could be loaded.
    """
    if not message or not message.strip() or not conversation_id or not agent_id:
        raise ValidationError("Message, conversation ID, and agent ID are required")

    agent = store.get_agent(db, agent_id)
    if not agent.is_enabled:
        if config.ENFORCE_AGENT_ENABLED:
            raise NotFound("Agent not found")
        logger.warning("Generating a reply for disabled agent %s (%s)", agent.id, agent.name)

    conversation = store.get_conversation(db, conversation_id)
    store.ensure_conversation_access(conversation, session)

    store.append_message(db, conversation, MessageRole.USER, message)
    logger.info("User message saved in conversation %s", conversation.id)

    try:
        history = store.load_history(db, conversation.id)
    except SQLAlchemyError:
        logger.warning("Could not retrieve conversation history, continuing with empty history", exc_info=True)
        db.rollback()
        history = []
    logger.info("Retrieved conversation history: %d messages", len(history))

    prompt = build_prompt(agent.system_prompt, agent.name, history, message)
    try:
        reply = generator.generate(prompt)
        generated = True
    except UpstreamError as exc:
        logger.error("Error generating reply for agent %s: %s", agent.name, exc.message)
        if error_specific_fallback:
            reply = error_reply(agent.name, exc.kind)
        else:
            reply = fallback_reply(agent.name, had_history=len(history) > 0)
        generated = False

    saved = store.append_message(db, conversation, MessageRole.ASSISTANT, reply)
    logger.info("Assistant message saved, id=%s generated=%s", saved.id, generated)

    return ChatTurnResult(
        message=saved.content,
        message_id=saved.id,
        timestamp=as_utc(saved.created_at),
        generated=generated,
    )
