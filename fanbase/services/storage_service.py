# fanbase/services/storage_service.py
import base64
import binascii
import re
import secrets
import time
import logging
from pathlib import Path
from typing import Optional, Tuple
from fanbase.config import settings

logger = logging.getLogger(__name__)

DATA_URL = re.compile(r'^data:image/(?P<subtype>[\w.+-]+);base64,(?P<payload>.+)$', re.DOTALL)

def decode_data_url(data_url: str) -> Optional[Tuple[str, bytes]]:
    """Split a base64 image data URL into (subtype, bytes); None if malformed"""
    match = DATA_URL.match(data_url or "")
    if not match:
        return None
    try:
        return match.group("subtype"), base64.b64decode(match.group("payload"), validate=True)
    except (binascii.Error, ValueError):
        return None

class UploadStorage:
    """Stores uploaded images on local disk under <root>/<folder>/"""

    def __init__(self, root: str = settings.uploads_dir):
        self.root = Path(root)

    def save_data_url(self, data_url: str, folder: str) -> Optional[str]:
        """Persist a data URL and return its public path, or None when it cannot be decoded"""
        decoded = decode_data_url(data_url)
        if decoded is None:
            logger.warning(f"Rejected malformed image upload for {folder}")
            return None

        subtype, data = decoded
        extension = "jpg" if subtype == "jpeg" else subtype.split("+")[0]
        filename = f"{folder}-{int(time.time() * 1000)}-{secrets.token_hex(3)}.{extension}"
        directory = self.root / folder
        directory.mkdir(parents=True, exist_ok=True)
        (directory / filename).write_bytes(data)
        logger.info(f"Saved upload {folder}/{filename} ({len(data)} bytes)")
        return f"/uploads/{folder}/{filename}"

    def delete(self, public_path: Optional[str]) -> bool:
        """Remove a previously saved upload; paths outside the uploads root are ignored"""
        if not public_path or not public_path.startswith("/uploads/"):
            return False
        target = (self.root / public_path[len("/uploads/"):]).resolve()
        if self.root.resolve() not in target.parents:
            return False
        try:
            target.unlink()
            return True
        except FileNotFoundError:
            return False

upload_storage = UploadStorage()

def get_upload_storage() -> UploadStorage:
    return upload_storage
