# agentchat/models/setting.py
from sqlalchemy import Column, String, DateTime, ForeignKey
from agentchat.models.base import Base, new_id, utcnow

class Setting(Base):
    __tablename__ = "settings"
    
    id = Column(String, primary_key=True, index=True, default=new_id)  # UUID as string
    setting_key = Column(String, unique=True, nullable=False)
    setting_value = Column(String, nullable=True)
    description = Column(String, nullable=True)
    updated_by = Column(String, ForeignKey("profiles.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
