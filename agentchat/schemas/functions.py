# agentchat/schemas/functions.py
# Request bodies of the function-style endpoints. Bodies are parsed inside the
# handlers and fields are optional, so malformed or missing values are reported
# inside the error envelope, not as a 422.
import pydantic
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Any, Dict, Optional, Type, TypeVar

from agentchat.core.errors import ValidationError
from agentchat.models.profile import ProfileRole

BodyModel = TypeVar("BodyModel", bound=BaseModel)

class AdminOperationRequest(BaseModel):
    action: Optional[str] = None
    data: Optional[Dict[str, Any]] = None

class ChatTurnRequest(BaseModel):
    message: Optional[str] = None
    conversationId: Optional[str] = None
    agentId: Optional[str] = None

class ImageUploadRequest(BaseModel):
    imageData: Optional[str] = None
    fileName: Optional[str] = None
    bucketName: Optional[str] = None

# Payloads of the individual admin-operations actions
class CreateUserData(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: Optional[str] = None
    role: ProfileRole = ProfileRole.USER

class ProfileUpdates(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: Optional[EmailStr] = None
    full_name: Optional[str] = None
    role: Optional[ProfileRole] = None
    avatar_url: Optional[str] = None

def first_error_message(exc: pydantic.ValidationError) -> str:
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error.get("loc", ()))
    return f"{field}: {error['msg']}" if field else error["msg"]

def parse_function_body(model: Type[BodyModel], raw: bytes) -> BodyModel:
    """Validate a raw JSON body; an empty body counts as `{}`."""
    try:
        return model.model_validate_json(raw or b"{}")
    except pydantic.ValidationError as exc:
        raise ValidationError(f"Invalid request body: {first_error_message(exc)}")
