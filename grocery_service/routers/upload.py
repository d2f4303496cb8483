import logging
import random
import string
import time
from pathlib import Path

from fastapi import APIRouter, File, HTTPException, UploadFile

from .. import config

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/upload", tags=["upload"])

ALLOWED_CONTENT_TYPES = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}
IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "webp", "gif"}


def product_filename(original_name, content_type):
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=13))
    extension = Path(original_name or "").suffix.lstrip(".").lower()
    if extension not in IMAGE_EXTENSIONS:
        extension = ALLOWED_CONTENT_TYPES[content_type]
    return f"product-{int(time.time() * 1000)}-{suffix}.{extension}"


@router.post("")
async def upload_image(file: UploadFile = File(...)):
    if file.content_type not in ALLOWED_CONTENT_TYPES:
        raise HTTPException(
            status_code=400,
            detail="Invalid file type. Only JPEG, PNG, WEBP, and GIF are allowed.",
        )
    # Read one byte past the limit so oversize files are caught without loading them whole.
    content = await file.read(config.MAX_UPLOAD_BYTES + 1)
    if len(content) > config.MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=400, detail="File size too large. Maximum size is 5MB.")

    filename = product_filename(file.filename, file.content_type)
    target_dir = Path(config.UPLOAD_DIR) / "products"
    target_dir.mkdir(parents=True, exist_ok=True)
    (target_dir / filename).write_bytes(content)
    logger.info("Stored upload %s (%d bytes)", filename, len(content))

    url = f"{config.UPLOAD_URL_PREFIX.rstrip('/')}/products/{filename}"
    return {"url": url, "filename": filename}
