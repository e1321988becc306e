# agentchat/core/storage.py
"""
Bucketed file storage on the local filesystem.

Objects live at <STORAGE_DIR>/<bucket>/<file name> and are served read-only
under PUBLIC_STORAGE_PATH. Uploads overwrite an existing object of the same name.
"""
import base64
import binascii
import logging
import os
import re
from dataclasses import dataclass
from typing import Optional

from agentchat.core import config
from agentchat.core.errors import ValidationError

logger = logging.getLogger(__name__)

BUCKET_NAME_RE = re.compile(r"^[a-z0-9][a-z0-9_-]{0,62}$")
FILE_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._ -]{0,254}$")
DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)(?:;[\w=.+-]+)*;base64,(?P<data>.*)$", re.DOTALL)


@dataclass(frozen=True)
class DecodedDataUrl:
    mime_type: str
    data: bytes


def decode_data_url(data_url: str) -> DecodedDataUrl:
    """Split a base64 `data:` URL into its MIME type and raw bytes."""
    match = DATA_URL_RE.match(data_url or "")
    if not match:
        raise ValidationError("Image data must be a base64 data URL")
    try:
        data = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Image data is not valid base64")
    return DecodedDataUrl(mime_type=match.group("mime").lower(), data=data)


class LocalStorage:
    def __init__(self, root: Optional[str] = None, public_base_url: Optional[str] = None):
        self.root = root or config.STORAGE_DIR
        self.public_base_url = (public_base_url or config.PUBLIC_BASE_URL).rstrip("/")
        os.makedirs(self.root, exist_ok=True)

    def object_path(self, bucket_name: str, file_name: str) -> str:
        if not BUCKET_NAME_RE.match(bucket_name or ""):
            raise ValidationError(f"Invalid bucket name: {bucket_name}")
        if not FILE_NAME_RE.match(file_name or "") or ".." in file_name:
            raise ValidationError(f"Invalid file name: {file_name}")
        return os.path.join(self.root, bucket_name, file_name)

    def public_url(self, bucket_name: str, file_name: str) -> str:
        return f"{self.public_base_url}{config.PUBLIC_STORAGE_PATH}/{bucket_name}/{file_name}"

    def upload(self, bucket_name: str, file_name: str, data: bytes) -> str:
        """Write (or overwrite) one object and return its public URL."""
        path = self.object_path(bucket_name, file_name)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "wb") as buffer:
            buffer.write(data)
        logger.info("Stored %d bytes at %s/%s", len(data), bucket_name, file_name)
        return self.public_url(bucket_name, file_name)


def get_storage() -> LocalStorage:
    return LocalStorage()
