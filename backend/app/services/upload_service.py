"""
Upload Service
Stores product images on disk and builds the public URL they are served from
"""
import logging
import time
from pathlib import Path
from typing import List, Optional, Sequence

from fastapi import UploadFile

from app.core.config import Settings
from app.core.exceptions import InvalidAssetError

logger = logging.getLogger(__name__)

# Accepted MIME types -> stored file extension
FILE_TYPE_MAP = {
    'image/png': 'png',
    'image/jpeg': 'jpeg',
    'image/jpg': 'jpg',
}

UPLOADS_URL_PATH = "public/uploads"


class UploadService:
    """Validates and stores uploaded images"""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.upload_dir = Path(settings.UPLOAD_DIR)

    @staticmethod
    def extension_for(content_type: Optional[str]) -> str:
        """
        Map a MIME type to the extension we store it under

        Raises:
            InvalidAssetError: if the type is not an accepted image type
        """
        extension = FILE_TYPE_MAP.get((content_type or "").lower())
        if not extension:
            raise InvalidAssetError("Invalid Image Type")
        return extension

    @staticmethod
    def build_filename(original_name: str, extension: str, millis: Optional[int] = None) -> str:
        """
        Spaces become dashes: 'my photo.png' -> 'my-photo.png-1700000000000.png'

        Any directory part of the client-supplied name is dropped, so the file
        always lands directly in the upload directory.
        """
        stamp = millis if millis is not None else int(time.time() * 1000)
        base_name = Path((original_name or "").replace("\\", "/")).name or "image"
        safe_name = "-".join(base_name.split(" "))
        return f"{safe_name}-{stamp}.{extension}"

    def base_url(self, request_base_url: str) -> str:
        """Configured PUBLIC_BASE_URL, or the scheme and host the request came in on"""
        base = self.settings.PUBLIC_BASE_URL or request_base_url
        return f"{base.rstrip('/')}/{UPLOADS_URL_PATH}/"

    async def save(self, upload: UploadFile, request_base_url: str) -> str:
        """
        Validate and store one image

        Returns:
            Fully qualified URL of the stored file
        """
        extension = self.extension_for(upload.content_type)
        filename = self.build_filename(upload.filename, extension)

        contents = await upload.read()
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        (self.upload_dir / filename).write_bytes(contents)

        logger.info(f"Stored upload {filename} ({len(contents)} bytes)")
        return f"{self.base_url(request_base_url)}{filename}"

    async def save_many(self, uploads: Sequence[UploadFile], request_base_url: str) -> List[str]:
        """Store a batch of images; the whole batch is validated before anything is written"""
        for upload in uploads:
            self.extension_for(upload.content_type)
        return [await self.save(upload, request_base_url) for upload in uploads]
