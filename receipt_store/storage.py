"""
Cloudinary blob store for uploaded receipt files.
"""
from __future__ import annotations

import io
import logging
from typing import Optional

import cloudinary
import cloudinary.uploader

logger = logging.getLogger(__name__)


def public_id_for(filename: Optional[str]) -> Optional[str]:
    """``scan.v2.pdf`` → ``scan.v2``; names without an extension are kept."""
    if not filename:
        return None
    base, dot, _ = filename.rpartition(".")
    return base if dot and base else filename


class BlobStore:
    def __init__(self, cloud_name: str, api_key: str, api_secret: str, folder: str):
        if not (cloud_name and api_key and api_secret):
            logger.warning(
                "Cloudinary env vars are not fully configured. File uploads will fail until "
                "CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY, and CLOUDINARY_API_SECRET are set."
            )
        self.folder = folder
        self._config = dict(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )

    @classmethod
    def from_settings(cls, settings) -> "BlobStore":
        return cls(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            folder=settings.CLOUDINARY_FOLDER,
        )

    def upload(self, data: bytes, filename: Optional[str] = None) -> dict:
        """Upload *data* and return ``{secure_url, public_id, resource_type}``."""
        options = {"folder": self.folder, "resource_type": "auto", **self._config}
        public_id = public_id_for(filename)
        if public_id:
            options["public_id"] = public_id

        result = cloudinary.uploader.upload(io.BytesIO(data), **options)
        logger.info("Uploaded %s to Cloudinary as %s", filename or "file", result.get("public_id"))
        return {
            "secure_url": result["secure_url"],
            "public_id": result["public_id"],
            "resource_type": result["resource_type"],
        }
