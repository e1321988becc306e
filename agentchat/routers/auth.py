# agentchat/routers/auth.py
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from agentchat.core.database import get_db
from agentchat.core.security import create_access_token, hash_password, verify_password
from agentchat.core.session import (
    SessionContext,
    SessionEvent,
    SessionEvents,
    SessionEventType,
    get_session,
    get_session_events,
)
from agentchat.models.profile import Profile, ProfileRole
from agentchat.models.user import User
from agentchat.schemas.auth import AuthResponse, LoginRequest, ProfileResponse, SignupRequest, profile_response

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    payload: SignupRequest,
    db: Session = Depends(get_db),
    events: SessionEvents = Depends(get_session_events),
):
    """
    Register a new account with the `user` role and sign it in.

    - **email**: Unique sign-in email.
    - **password**: At least 6 characters.
    - **full_name**: Optional display name.
    """
    email = payload.email.lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=409, detail="User already registered.")

    user = User(email=email, password_hash=hash_password(payload.password))
    db.add(user)
    db.flush()
    profile = Profile(id=user.id, email=email, full_name=payload.full_name, role=ProfileRole.USER.value)
    db.add(profile)
    db.commit()
    db.refresh(profile)
    logger.info("Registered user %s", profile.id)

    events.publish(SessionEvent(type=SessionEventType.SIGNED_IN, user_id=profile.id))
    return AuthResponse(
        access_token=create_access_token(profile.id, profile.role),
        profile=profile_response(profile),
    )

@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    events: SessionEvents = Depends(get_session_events),
):
    """
    Exchange email and password for a bearer token.
    """
    user = db.query(User).filter(User.email == payload.email.lower()).first()
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    profile = db.query(Profile).filter(Profile.id == user.id).first()
    if not profile:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found.")

    events.publish(SessionEvent(type=SessionEventType.SIGNED_IN, user_id=profile.id))
    return AuthResponse(
        access_token=create_access_token(profile.id, profile.role),
        profile=profile_response(profile),
    )

@router.post("/logout")
def logout(
    session: SessionContext = Depends(get_session),
    events: SessionEvents = Depends(get_session_events),
):
    """
    Revoke the token used for this request.
    """
    events.publish(SessionEvent(
        type=SessionEventType.SIGNED_OUT,
        user_id=session.user_id,
        token_id=session.token_id,
        expires_at=session.expires_at,
    ))
    return {"detail": "Signed out successfully."}

@router.get("/me", response_model=ProfileResponse)
def me(session: SessionContext = Depends(get_session), db: Session = Depends(get_db)):
    profile = db.query(Profile).filter(Profile.id == session.user_id).first()
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found.")
    return profile_response(profile)
