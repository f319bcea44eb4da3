"""
방문자 사진 저장 서비스
- base64 data URL 또는 업로드 파일을 UPLOAD_DIR 에 저장하고 /uploads/<파일명> 참조를 반환
- 저장 실패는 체크인을 막지 않음: 경고 로그 후 None 반환
"""
import base64
import io
import os
import re
import uuid
from typing import Optional
from PIL import Image
from app.config import settings
from app.utils.logger import get_logger

logger = get_logger(__name__)

UPLOAD_URL_PREFIX = "/uploads"
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/webp"}
EXT_BY_CONTENT_TYPE = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}
_DATA_URL_RE = re.compile(r"^data:(image/[a-zA-Z]+);base64,(.+)$", re.DOTALL)
# 손상되었거나 지나치게 큰 이미지 (DecompressionBombError 는 OSError 가 아님)
PHOTO_ERRORS = (OSError, ValueError, Image.DecompressionBombError)


def resize_image_if_needed(contents: bytes, max_bytes: Optional[int] = None) -> bytes:
    """최대 크기를 넘는 이미지는 품질/해상도를 낮춰 재인코딩"""
    max_bytes = max_bytes or settings.max_photo_bytes
    if len(contents) <= max_bytes:
        return contents
    image = Image.open(io.BytesIO(contents))
    image_format = image.format if image.format else "JPEG"
    if image_format.upper() in ["JPEG", "JPG"] and image.mode not in ("RGB", "L"):
        image = image.convert("RGB")
    quality = 85  # JPEG의 경우
    data = contents
    for trial in range(10):
        buffer = io.BytesIO()
        save_kwargs = {"format": image_format}
        if image_format.upper() in ["JPEG", "JPG"]:
            save_kwargs["quality"] = quality
            save_kwargs["optimize"] = True
        image.save(buffer, **save_kwargs)
        data = buffer.getvalue()
        if len(data) <= max_bytes:
            return data
        if image_format.upper() in ["JPEG", "JPG"] and quality > 30:
            quality -= 10
        else:
            w, h = image.size
            image = image.resize((max(1, int(w * 0.9)), max(1, int(h * 0.9))), Image.LANCZOS)
    return data


def _write_upload(contents: bytes, ext: str) -> str:
    os.makedirs(settings.upload_dir, exist_ok=True)
    data = resize_image_if_needed(contents)
    filename = f"{uuid.uuid4()}{ext}"
    with open(os.path.join(settings.upload_dir, filename), "wb") as f:
        f.write(data)
    logger.info(f"[PHOTO] Saved {filename} ({len(contents)} bytes)")
    return f"{UPLOAD_URL_PREFIX}/{filename}"


def store_photo_inline(data_url: Optional[str]) -> Optional[str]:
    """base64 data URL 저장. 형식이 맞지 않거나 실패하면 None"""
    if not data_url or not isinstance(data_url, str):
        return None
    match = _DATA_URL_RE.match(data_url.strip())
    if not match:
        logger.warning("[PHOTO] Ignoring photo field that is not an image data URL")
        return None
    mime = match.group(1).lower()
    ext = EXT_BY_CONTENT_TYPE.get(mime, ".jpg")
    try:
        contents = base64.b64decode(match.group(2))
        return _write_upload(contents, ext)
    except PHOTO_ERRORS as e:
        logger.error(f"[PHOTO] Failed to store inline photo: {e}")
        return None


def store_photo_bytes(contents: bytes, filename: Optional[str] = None,
                      content_type: Optional[str] = None) -> Optional[str]:
    """업로드 파일 저장. 원본 확장자를 우선 사용"""
    if not contents:
        return None
    ext = os.path.splitext(filename or "")[1].lower()
    if not ext:
        ext = EXT_BY_CONTENT_TYPE.get((content_type or "").lower(), "")
    if content_type and content_type.lower() not in ALLOWED_CONTENT_TYPES:
        logger.warning(f"[PHOTO] Unexpected content type {content_type} for {filename}")
    try:
        return _write_upload(contents, ext)
    except PHOTO_ERRORS as e:
        logger.error(f"[PHOTO] Failed to store uploaded photo {filename}: {e}")
        return None


def resolve_photo_url(reference: Optional[str], base_url: str) -> Optional[str]:
    """저장된 참조를 클라이언트가 바로 쓸 수 있는 절대 URL 로 변환"""
    if not reference:
        return None
    if reference.startswith(("http://", "https://")):
        return reference
    base = (settings.public_base_url or base_url).rstrip("/")
    if not reference.startswith("/"):
        reference = "/" + reference
    return base + reference
