# utils/storage.py
import asyncio
import logging
from typing import BinaryIO, List

import cloudinary
import cloudinary.uploader
from starlette.concurrency import run_in_threadpool

from config import CLOUDINARY_API_KEY, CLOUDINARY_API_SECRET, CLOUDINARY_CLOUD_NAME, UPLOAD_FOLDER
from errors import InternalError, NotFoundError

logger = logging.getLogger(__name__)

cloudinary.config(
    cloud_name=CLOUDINARY_CLOUD_NAME,
    api_key=CLOUDINARY_API_KEY,
    api_secret=CLOUDINARY_API_SECRET,
    secure=True,
)

TRANSFORMATION = [
    {"width": 1200, "height": 800, "crop": "limit"},
    {"quality": "auto"},
    {"fetch_format": "auto"},
]


async def upload_image(file: BinaryIO, folder: str = UPLOAD_FOLDER) -> dict:
    try:
        result = await run_in_threadpool(
            cloudinary.uploader.upload, file, folder=folder, transformation=TRANSFORMATION
        )
    except Exception as err:
        logger.exception("Cloudinary upload failed")
        raise InternalError("Image upload failed", detail=str(err))
    return {"url": result["secure_url"], "public_id": result["public_id"]}


async def upload_images(files: List[BinaryIO], folder: str = UPLOAD_FOLDER) -> List[dict]:
    return list(await asyncio.gather(*(upload_image(file, folder) for file in files)))


async def delete_image(public_id: str) -> dict:
    try:
        result = await run_in_threadpool(cloudinary.uploader.destroy, public_id)
    except Exception as err:
        logger.exception("Cloudinary delete failed")
        raise InternalError("Image delete failed", detail=str(err))
    if result.get("result") != "ok":
        raise NotFoundError(f"Image not found: {public_id}")
    return {"public_id": public_id, "result": result["result"]}
