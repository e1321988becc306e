# agentchat/routers/admin_operations.py
"""
POST /admin-operations: privileged user management and transcript export.

The body is `{"action": ..., "data": {...}}`. The caller must hold the admin
role. Every failure, including a missing or non-admin credential, comes back
as the 500 error envelope with code ADMIN_OPERATION_FAILED.
"""
import logging
from typing import Any, Callable, Dict, Optional

import pydantic
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from agentchat.core import store
from agentchat.core.database import get_db
from agentchat.core.errors import NotFound, ValidationError
from agentchat.core.responses import function_data, function_error, get_raw_body, preflight
from agentchat.core.security import hash_password
from agentchat.core.session import (
    IdentityVerifier,
    SessionEvent,
    SessionEvents,
    SessionEventType,
    ensure_admin,
    get_bearer_token,
    get_identity_verifier,
    get_session_events,
)
from agentchat.core.transcript import format_transcript
from agentchat.models.profile import Profile
from agentchat.models.user import User
from agentchat.schemas.conversation import conversation_response
from agentchat.schemas.functions import (
    AdminOperationRequest,
    CreateUserData,
    ProfileUpdates,
    first_error_message,
    parse_function_body,
)

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_CODE = "ADMIN_OPERATION_FAILED"


def create_user(db: Session, data: Dict[str, Any], events: SessionEvents) -> Dict[str, Any]:
    if not data.get("email") or not data.get("password"):
        raise ValidationError("Email and password are required")
    try:
        fields = CreateUserData.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ValidationError(f"Failed to create user: {first_error_message(exc)}")

    email = fields.email.lower()
    if db.query(User).filter(User.email == email).first():
        raise ValidationError("Failed to create user: User already registered")

    user = User(email=email, password_hash=hash_password(fields.password))
    db.add(user)
    db.flush()
    db.add(Profile(id=user.id, email=email, full_name=fields.full_name, role=fields.role.value))
    db.commit()
    logger.info("Admin created user %s with role %s", user.id, fields.role.value)

    return {"id": user.id, "email": email, "full_name": fields.full_name, "role": fields.role.value}


def update_user(db: Session, data: Dict[str, Any], events: SessionEvents) -> Dict[str, Any]:
    user_id = data.get("userId")
    updates = data.get("updates")
    if not user_id or not updates:
        raise ValidationError("User ID and updates are required")
    try:
        changes = ProfileUpdates.model_validate(updates).model_dump(exclude_unset=True)
    except pydantic.ValidationError as exc:
        raise ValidationError(f"Failed to update user profile: {first_error_message(exc)}")

    profile = db.query(Profile).filter(Profile.id == user_id).first()
    if not profile:
        raise NotFound("User not found")

    if changes.get("role") is not None:
        changes["role"] = changes["role"].value
    if changes.get("email"):
        email = changes["email"].lower()
        taken = db.query(User).filter(User.email == email, User.id != user_id).first()
        if taken:
            raise ValidationError("Failed to update user profile: email already in use")
        changes["email"] = email
        profile.user.email = email

    for field, value in changes.items():
        if field in ("email", "role") and value is None:
            continue
        setattr(profile, field, value)
    db.commit()

    events.publish(SessionEvent(type=SessionEventType.PROFILE_UPDATED, user_id=user_id))
    return {"success": True}


def get_conversation_transcript(db: Session, data: Dict[str, Any], events: SessionEvents) -> Dict[str, Any]:
    conversation_id = data.get("conversationId")
    if not conversation_id:
        raise ValidationError("Conversation ID is required")

    conversation = store.get_conversation(db, conversation_id)
    messages = store.load_history(db, conversation.id)

    details = conversation_response(conversation).model_dump()
    details["profiles"] = {"full_name": conversation.owner.full_name if conversation.owner else None}
    details["agents"] = {"name": conversation.agent.name if conversation.agent else None}

    return {
        "conversation": details,
        "transcript": format_transcript(messages),
        "messageCount": len(messages),
    }


ADMIN_ACTIONS: Dict[str, Callable[[Session, Dict[str, Any], SessionEvents], Dict[str, Any]]] = {
    "create_user": create_user,
    "update_user": update_user,
    "get_conversation_transcript": get_conversation_transcript,
}


@router.options("/admin-operations")
def admin_operations_preflight():
    return preflight()


@router.post("/admin-operations")
def admin_operations(
    raw_body: bytes = Depends(get_raw_body),
    token: Optional[str] = Depends(get_bearer_token),
    db: Session = Depends(get_db),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
    events: SessionEvents = Depends(get_session_events),
):
    try:
        payload = parse_function_body(AdminOperationRequest, raw_body)
        if not payload.action:
            raise ValidationError("Action is required")

        session = verifier.verify(db, token)
        ensure_admin(session)

        handler = ADMIN_ACTIONS.get(payload.action)
        if handler is None:
            raise ValidationError(f"Unknown action: {payload.action}")

        logger.info("Admin %s running %s", session.user_id, payload.action)
        return function_data(handler(db, payload.data or {}, events))
    except Exception as exc:
        logger.exception("Admin operations error")
        db.rollback()
        return function_error(ERROR_CODE, exc)
