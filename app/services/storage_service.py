"""
Storage Service - report images in Cloud Storage.

Files are named {userId}_{timestamp}_{index}.{ext}. Uploads for one report run
concurrently and are awaited together; if any fails the submission is
aborted and the files that did land are removed.
"""

import asyncio
import time
from typing import List, Optional
from pydantic import BaseModel
import logging

from app.config.firebase import get_bucket
from app.core.errors import BackendError, ValidationError
from app.core.settings import settings

logger = logging.getLogger(__name__)


class ImageFile(BaseModel):
    """An image received with a report submission."""
    filename: str
    content: bytes
    content_type: Optional[str] = None


class StorageService:

    def __init__(self, bucket=None, folder: Optional[str] = None):
        self._bucket = bucket
        self.folder = folder or settings.REPORT_IMAGES_FOLDER

    @property
    def bucket(self):
        if self._bucket is None:
            self._bucket = get_bucket()
        return self._bucket

    @staticmethod
    def build_filename(user_id: str, timestamp_ms: int, index: int, original_name: str) -> str:
        ext = original_name.rsplit(".", 1)[-1].lower() if "." in original_name else ""
        return f"{user_id}_{timestamp_ms}_{index}.{ext or 'jpg'}"

    @staticmethod
    def validate_images(images: List[ImageFile]) -> None:
        if len(images) > settings.MAX_REPORT_IMAGES:
            raise ValidationError(f"At most {settings.MAX_REPORT_IMAGES} images per report")
        for image in images:
            if image.content_type and not image.content_type.startswith("image/"):
                raise ValidationError(f"{image.filename} is not an image ({image.content_type})")
            if not image.content:
                raise ValidationError(f"{image.filename} is empty")

    def _upload_one(self, path: str, image: ImageFile) -> str:
        blob = self.bucket.blob(path)
        blob.upload_from_string(image.content, content_type=image.content_type or "application/octet-stream")
        blob.make_public()
        return blob.public_url

    def _delete_quietly(self, path: str) -> None:
        try:
            self.bucket.blob(path).delete()
        except Exception as e:
            logger.warning(f"Failed to clean up {path}: {e}")

    def delete_images(self, urls: List[str]) -> None:
        """Best-effort removal of uploaded images, given their public URLs."""
        marker = f"/{self.folder}/"
        for url in urls:
            if marker not in url:
                logger.warning(f"Not a report image URL, skipping cleanup: {url}")
                continue
            self._delete_quietly(self.folder + "/" + url.split(marker, 1)[1])

    async def upload_images(self, user_id: str, images: List[ImageFile]) -> List[str]:
        """
        Upload all images concurrently and return their public URLs in order.

        Raises:
            BackendError: If any upload fails
        """
        if not images:
            return []

        self.validate_images(images)

        timestamp_ms = int(time.time() * 1000)
        paths = [
            f"{self.folder}/{self.build_filename(user_id, timestamp_ms, index, image.filename)}"
            for index, image in enumerate(images)
        ]

        loop = asyncio.get_running_loop()
        jobs = [
            loop.run_in_executor(None, self._upload_one, path, image)
            for path, image in zip(paths, images)
        ]
        results = await asyncio.gather(*jobs, return_exceptions=True)

        failures = [r for r in results if isinstance(r, Exception)]
        if failures:
            for path, result in zip(paths, results):
                if not isinstance(result, Exception):
                    self._delete_quietly(path)
            logger.error(f"Image upload failed for {user_id}: {failures[0]}")
            raise BackendError(f"Image upload failed: {failures[0]}")

        logger.info(f"Uploaded {len(results)} image(s) for {user_id}")
        return list(results)


# Global service instance (singleton pattern)
_storage_service = None


def get_storage_service() -> StorageService:
    global _storage_service
    if _storage_service is None:
        _storage_service = StorageService()
    return _storage_service
