# agentchat/schemas/setting.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

class SettingsResponse(BaseModel):
    app_logo_url: str
    brand_color: str
    app_name: str

class SettingsUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    app_logo_url: Optional[str] = None
    brand_color: Optional[str] = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")
    app_name: Optional[str] = Field(None, min_length=1)
