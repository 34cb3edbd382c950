# In app/tools/file_uploader.py
import logging
from typing import Optional, Tuple

import cloudinary
import cloudinary.uploader

from app.core.config import settings
from app.core.errors import ServiceUnavailableError

logger = logging.getLogger(__name__)

PROFILE_FOLDER = "resume_builder_profiles"
PROFILE_TRANSFORMATION = [
    {"width": 500, "height": 500, "crop": "limit"},
    {"quality": "auto"},
    {"fetch_format": "auto"},
]


def configure_cloudinary():
    """Configures the Cloudinary client from settings.

    Keys:
      CLOUDINARY_CLOUD_NAME
      CLOUDINARY_API_KEY
      CLOUDINARY_API_SECRET
    """
    credentials = {
        "CLOUDINARY_CLOUD_NAME": settings.CLOUDINARY_CLOUD_NAME,
        "CLOUDINARY_API_KEY": settings.CLOUDINARY_API_KEY,
        "CLOUDINARY_API_SECRET": settings.CLOUDINARY_API_SECRET,
    }
    missing = [k for k, v in credentials.items() if not v]
    if missing:
        logger.warning(f"Cloudinary config missing vars: {missing}. Uploads will likely fail.")

    cloudinary.config(
        cloud_name=settings.CLOUDINARY_CLOUD_NAME,
        api_key=settings.CLOUDINARY_API_KEY,
        api_secret=settings.CLOUDINARY_API_SECRET,
        secure=True,
    )


def upload_image(
    content: bytes,
    folder: str = PROFILE_FOLDER,
    transformation: Optional[list] = None,
) -> Tuple[str, str]:
    """Uploads image bytes to Cloudinary and returns ``(secure_url, public_id)``."""
    try:
        configure_cloudinary()
        upload_result = cloudinary.uploader.upload(
            content,
            folder=folder,
            resource_type="image",
            transformation=transformation if transformation is not None else PROFILE_TRANSFORMATION,
        )
    except Exception as e:
        logger.error(f"Cloudinary upload failed: {e}")
        raise ServiceUnavailableError("Failed to upload image", detail=str(e))

    logger.info("File successfully uploaded to Cloudinary.")
    return upload_result["secure_url"], upload_result["public_id"]


def delete_image(public_id: str) -> bool:
    """Deletes a hosted image. False when Cloudinary did not find it."""
    try:
        configure_cloudinary()
        result = cloudinary.uploader.destroy(public_id)
    except Exception as e:
        logger.error(f"Cloudinary delete failed: {e}")
        raise ServiceUnavailableError("Failed to delete image", detail=str(e))
    return result.get("result") == "ok"
