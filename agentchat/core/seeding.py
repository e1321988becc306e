# agentchat/core/seeding.py
"""
Idempotent startup data: branding defaults and the bootstrap admin account.

Usage:
    from agentchat.core.seeding import seed_default_settings, seed_admin
    seed_default_settings(db)
    seed_admin(db, email, password)
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from agentchat.core.config import DEFAULT_SETTINGS, SETTING_DESCRIPTIONS
from agentchat.core.security import hash_password
from agentchat.models.profile import Profile, ProfileRole
from agentchat.models.setting import Setting
from agentchat.models.user import User

logger = logging.getLogger(__name__)


def seed_default_settings(db: Session) -> List[str]:
    """Insert any branding key that is missing. Returns the keys created."""
    existing = {key for (key,) in db.query(Setting.setting_key).all()}
    created = []
    for key, value in DEFAULT_SETTINGS.items():
        if key in existing:
            continue
        db.add(Setting(setting_key=key, setting_value=value, description=SETTING_DESCRIPTIONS.get(key)))
        created.append(key)

    if created:
        db.commit()
        logger.info("Seeded default settings: %s", ", ".join(created))
    return created


def seed_admin(db: Session, email: str, password: str, full_name: Optional[str] = "Administrator") -> Optional[Profile]:
    """
    Make sure an admin account exists for `email`.

    An existing account with that email is promoted to admin; its password is
    left untouched.
    """
    if not email or not password:
        return None

    email = email.strip().lower()
    user = db.query(User).filter(User.email == email).first()
    if not user:
        user = User(email=email, password_hash=hash_password(password))
        db.add(user)
        db.flush()
        profile = Profile(id=user.id, email=email, full_name=full_name, role=ProfileRole.ADMIN.value)
        db.add(profile)
        db.commit()
        logger.info("Created bootstrap admin %s", email)
        return profile

    profile = db.query(Profile).filter(Profile.id == user.id).first()
    if not profile:
        profile = Profile(id=user.id, email=email, full_name=full_name, role=ProfileRole.ADMIN.value)
        db.add(profile)
        db.commit()
        logger.info("Created missing admin profile for %s", email)
    elif profile.role != ProfileRole.ADMIN.value:
        profile.role = ProfileRole.ADMIN.value
        db.commit()
        logger.info("Promoted %s to admin", email)
    else:
        logger.info("Bootstrap admin %s already exists, skipping seed", email)
    return profile
