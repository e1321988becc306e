# agentchat/routers/settings.py
import logging
from typing import Dict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from agentchat.core.config import DEFAULT_SETTINGS, SETTING_DESCRIPTIONS
from agentchat.core.database import get_db
from agentchat.core.session import SessionContext, require_admin
from agentchat.models.base import utcnow
from agentchat.models.setting import Setting
from agentchat.schemas.setting import SettingsResponse, SettingsUpdate

logger = logging.getLogger(__name__)

router = APIRouter()

def load_settings(db: Session) -> Dict[str, str]:
    """Branding values from the settings table, falling back to the defaults for empty keys."""
    stored = {s.setting_key: s.setting_value for s in db.query(Setting).all()}
    return {key: stored.get(key) or default for key, default in DEFAULT_SETTINGS.items()}

@router.get("", response_model=SettingsResponse)
def get_settings(db: Session = Depends(get_db)):
    """
    Public branding settings (logo URL, brand color, app name).
    """
    return SettingsResponse(**load_settings(db))

@router.put("", response_model=SettingsResponse)
def update_settings(
    payload: SettingsUpdate,
    session: SessionContext = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Upsert any of the branding keys. Omitted keys keep their current value.
    """
    updates = payload.model_dump(exclude_none=True)
    for key, value in updates.items():
        setting = db.query(Setting).filter(Setting.setting_key == key).first()
        if setting:
            setting.setting_value = value
            setting.updated_by = session.user_id
            setting.updated_at = utcnow()
        else:
            db.add(Setting(
                setting_key=key,
                setting_value=value,
                description=SETTING_DESCRIPTIONS.get(key),
                updated_by=session.user_id,
            ))
    db.commit()
    logger.info("Settings %s updated by %s", ", ".join(sorted(updates)) or "(none)", session.user_id)
    return SettingsResponse(**load_settings(db))
