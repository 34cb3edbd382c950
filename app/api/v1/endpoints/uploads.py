import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool

from app.core.security import get_current_account_id
from app.tools.file_uploader import delete_image, upload_image

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_IMAGE_BYTES = 5 * 1024 * 1024


@router.post("/upload")
async def upload_profile_image(
    image: UploadFile = File(...),
    account_id: int = Depends(get_current_account_id),
):
    if not (image.content_type or "").startswith("image/"):
        raise HTTPException(status_code=400, detail="Only image files are allowed!")

    content = await image.read()
    if len(content) > MAX_IMAGE_BYTES:
        raise HTTPException(status_code=400, detail="File too large. Maximum size is 5MB")

    url, public_id = await run_in_threadpool(upload_image, content)
    logger.info(f"Account {account_id} uploaded image {public_id}")
    return {
        "success": True,
        "message": "Image uploaded successfully",
        "url": url,
        "public_id": public_id,
    }


@router.delete("/delete/{public_id:path}")
async def delete_profile_image(public_id: str, account_id: int = Depends(get_current_account_id)):
    # Cloudinary public ids include the folder, e.g. "resume_builder_profiles/abc123"
    deleted = await run_in_threadpool(delete_image, public_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Image not found")
    return {"success": True, "message": "Image deleted successfully"}
