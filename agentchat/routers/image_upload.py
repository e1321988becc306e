# agentchat/routers/image_upload.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from agentchat.core import config
from agentchat.core.database import get_db
from agentchat.core.errors import ValidationError
from agentchat.core.responses import function_data, function_error, get_raw_body, preflight
from agentchat.core.session import IdentityVerifier, get_bearer_token, get_identity_verifier
from agentchat.core.storage import LocalStorage, decode_data_url, get_storage
from agentchat.schemas.functions import ImageUploadRequest, parse_function_body

logger = logging.getLogger(__name__)

router = APIRouter()


@router.options("/image-upload")
def image_upload_preflight():
    return preflight()


@router.post("/image-upload")
def image_upload(
    raw_body: bytes = Depends(get_raw_body),
    token: Optional[str] = Depends(get_bearer_token),
    db: Session = Depends(get_db),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
    storage: LocalStorage = Depends(get_storage),
):
    """
    Store a base64 data-URL image under <bucketName>/<fileName> and return its
    public URL. An existing object with the same name is replaced.
    """
    try:
        session = verifier.verify(db, token)
        payload = parse_function_body(ImageUploadRequest, raw_body)

        if not payload.imageData or not payload.fileName or not payload.bucketName:
            raise ValidationError("Image data, filename, and bucket name are required")

        decoded = decode_data_url(payload.imageData)
        if not decoded.mime_type.startswith("image/"):
            raise ValidationError(f"Unsupported content type: {decoded.mime_type}")
        if len(decoded.data) > config.MAX_UPLOAD_BYTES:
            raise ValidationError(f"Image exceeds the {config.MAX_UPLOAD_BYTES} byte limit")

        public_url = storage.upload(payload.bucketName, payload.fileName, decoded.data)
        logger.info("User %s uploaded %s/%s", session.user_id, payload.bucketName, payload.fileName)

        return function_data({
            "publicUrl": public_url,
            "fileName": payload.fileName,
            "bucketName": payload.bucketName,
        })
    except Exception as exc:
        logger.exception("Image upload error")
        return function_error("IMAGE_UPLOAD_FAILED", exc)
