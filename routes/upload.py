# routes/upload.py
from typing import List

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from config import UPLOAD_FOLDER
from utils.auth import get_current_user
from utils.response import send_success
from utils.storage import delete_image, upload_image, upload_images

router = APIRouter(dependencies=[Depends(get_current_user)])


# === POST: Upload one image ===
@router.post("/image")
async def upload_one(file: UploadFile = File(...), folder: str = Form(UPLOAD_FOLDER)):
    image = await upload_image(file.file, folder)
    return send_success("Image uploaded successfully", image)


# === POST: Upload several images ===
@router.post("/images")
async def upload_many(files: List[UploadFile] = File(...), folder: str = Form(UPLOAD_FOLDER)):
    images = await upload_images([f.file for f in files], folder)
    return send_success("Images uploaded successfully", images)


# === DELETE: Remove an image ===
@router.delete("/image")
async def remove_image(public_id: str = Query(..., min_length=1)):
    result = await delete_image(public_id)
    return send_success("Image deleted successfully", result)
