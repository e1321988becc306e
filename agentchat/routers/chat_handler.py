# agentchat/routers/chat_handler.py
"""
Chat turn endpoints.

`/chat-handler` and `/working-chat-handler` run the same turn. They differ in
the error code they report and in the apology used when generation fails:
`/chat-handler` names the kind of failure, `/working-chat-handler` falls back
on whether the conversation history could be loaded.

`/llm-check` lets an admin confirm the model credentials are configured without
exposing the key.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from agentchat.core.chatagent import ReplyGenerator, get_reply_generator, handle_chat_turn
from agentchat.core.database import get_db
from agentchat.core.responses import function_data, function_error, get_raw_body, preflight
from agentchat.core.session import (
    IdentityVerifier,
    SessionContext,
    get_bearer_token,
    get_identity_verifier,
    require_admin,
)
from agentchat.schemas.functions import ChatTurnRequest, parse_function_body

logger = logging.getLogger(__name__)

router = APIRouter()


def _run_turn(
    code: str,
    raw_body: bytes,
    token: Optional[str],
    db: Session,
    verifier: IdentityVerifier,
    generator: ReplyGenerator,
    error_specific_fallback: bool = False,
):
    try:
        session = verifier.verify(db, token)
        payload = parse_function_body(ChatTurnRequest, raw_body)
        logger.info("Chat turn from %s in conversation %s", session.user_id, payload.conversationId)
        result = handle_chat_turn(
            db,
            session,
            generator,
            message=payload.message,
            conversation_id=payload.conversationId,
            agent_id=payload.agentId,
            error_specific_fallback=error_specific_fallback,
        )
        return function_data({
            "message": result.message,
            "messageId": result.message_id,
            "timestamp": result.timestamp,
        })
    except Exception as exc:
        logger.exception("Chat handler error")
        db.rollback()
        return function_error(code, exc)


@router.options("/chat-handler")
def chat_handler_preflight():
    return preflight()


@router.post("/chat-handler")
def chat_handler(
    raw_body: bytes = Depends(get_raw_body),
    token: Optional[str] = Depends(get_bearer_token),
    db: Session = Depends(get_db),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
    generator: ReplyGenerator = Depends(get_reply_generator),
):
    return _run_turn("CHAT_HANDLER_FAILED", raw_body, token, db, verifier, generator, error_specific_fallback=True)


@router.options("/working-chat-handler")
def working_chat_handler_preflight():
    return preflight()


@router.post("/working-chat-handler")
def working_chat_handler(
    raw_body: bytes = Depends(get_raw_body),
    token: Optional[str] = Depends(get_bearer_token),
    db: Session = Depends(get_db),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
    generator: ReplyGenerator = Depends(get_reply_generator),
):
    return _run_turn("WORKING_CHAT_HANDLER_FAILED", raw_body, token, db, verifier, generator)


@router.get("/llm-check")
def llm_check(
    session: SessionContext = Depends(require_admin),
    generator: ReplyGenerator = Depends(get_reply_generator),
):
    key = generator.api_key or ""
    return {
        "llmKeyExists": bool(key),
        "llmKeyLength": len(key),
        "llmKeyPrefix": f"{key[:8]}..." if key else None,
        "model": generator.model,
        "baseUrl": generator.base_url,
    }
