"""
File upload routes using S3
"""

from fastapi import APIRouter, Depends, File, UploadFile, status
from typing import Any, Dict

from ..auth.dependencies import Principal, get_current_principal
from ..core.exceptions import ValidationError
from ..core.logging import get_logger
from ..utils.s3_client import S3Client
from ..utils.storage import get_file_storage

router = APIRouter(tags=["File Management"])

logger = get_logger(__name__)

UPLOAD_FOLDERS = {
    "profile": "profile-pictures",
    "skill": "skills",
    "general": "uploads",
}


@router.post("/uploads", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
async def upload_file(
    file: UploadFile = File(...),
    upload_type: str = "general",
    principal: Principal = Depends(get_current_principal),
    storage: S3Client = Depends(get_file_storage),
):
    """
    Upload an image and get back its public URL

    - **file**: The file to upload
    - **upload_type**: "profile" for profile pictures, "skill" for skill media, "general" for anything else

    Folder structure:
    - Profile pictures: profile-pictures/user_{user_id}/
    - Skill media: skills/user_{user_id}/
    - General uploads: uploads/user_{user_id}/

    The URL goes into a profile's `profileImage` or a skill's `media`.
    """
    if not file.filename:
        raise ValidationError("File must have a name")
    if upload_type not in UPLOAD_FOLDERS:
        raise ValidationError(f"Unknown upload type: {upload_type}")

    upload_folder = f"{UPLOAD_FOLDERS[upload_type]}/user_{principal.user_id}"
    file_url = await storage.upload_file(file=file, folder=upload_folder)
    logger.info(f"User {principal.user_id} uploaded {file.filename} to {upload_folder}")

    return {
        "success": True,
        "message": "File uploaded successfully",
        "data": {
            "originalFilename": file.filename,
            "fileUrl": file_url,
            "contentType": file.content_type,
            "uploadType": upload_type,
            "folder": upload_folder,
        },
    }
