# agentchat/routers/admin.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from agentchat.core import store
from agentchat.core.database import get_db
from agentchat.core.session import SessionContext, require_admin
from agentchat.models.agent import Agent
from agentchat.models.conversation import Conversation
from agentchat.models.profile import Profile
from agentchat.schemas.admin import DashboardStats
from agentchat.schemas.auth import ProfileResponse, profile_response
from agentchat.schemas.conversation import ConversationSummary, conversation_summary

router = APIRouter()

@router.get("/stats", response_model=DashboardStats)
def dashboard_stats(session: SessionContext = Depends(require_admin), db: Session = Depends(get_db)):
    """
    Totals for the admin dashboard. A conversation counts as active when it is
    flagged active and was updated within the last 24 hours.
    """
    return DashboardStats(
        total_users=db.query(func.count(Profile.id)).scalar() or 0,
        total_agents=db.query(func.count(Agent.id)).scalar() or 0,
        total_conversations=db.query(func.count(Conversation.id)).scalar() or 0,
        active_conversations=store.count_recent_active_conversations(db),
    )

@router.get("/users", response_model=List[ProfileResponse])
def list_users(session: SessionContext = Depends(require_admin), db: Session = Depends(get_db)):
    profiles = db.query(Profile).order_by(Profile.created_at.desc()).all()
    return [profile_response(p) for p in profiles]

@router.get("/users/{user_id}/conversations", response_model=List[ConversationSummary])
def list_user_conversations(
    user_id: str,
    session: SessionContext = Depends(require_admin),
    db: Session = Depends(get_db)
):
    if not db.query(Profile).filter(Profile.id == user_id).first():
        raise HTTPException(status_code=404, detail="User not found.")
    return [conversation_summary(s) for s in store.conversation_summaries(db, user_id)]
