"""
Image store capability for identity documents.
Applies the bounding-box resize and quality normalization before storing.
"""
import logging
import uuid
from dataclasses import dataclass
from io import BytesIO

from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from PIL import Image, ImageOps

from common.validators import MAX_IMAGE_PIXELS

logger = logging.getLogger(__name__)


class ImageStoreError(Exception):
    """Raised when the image store fails to persist an upload."""


@dataclass(frozen=True)
class ImageTransform:
    max_width: int = 1000
    max_height: int = 1000
    quality: int = 85
    format: str = "JPEG"


@dataclass(frozen=True)
class StoredImage:
    url: str
    id: str


class ImageStore:
    """Interface for image hosting backends."""

    def upload(self, data: bytes, folder: str, transform: ImageTransform) -> StoredImage:
        raise NotImplementedError


def apply_transform(data: bytes, transform: ImageTransform) -> bytes:
    """Shrink to fit the bounding box (never upscale) and re-encode at the target quality."""
    with Image.open(BytesIO(data)) as img:
        if img.width * img.height > MAX_IMAGE_PIXELS:
            raise ValueError(f"Image dimensions {img.width}x{img.height} exceed the pixel limit")
        img = ImageOps.exif_transpose(img)
        if transform.format == "JPEG" and img.mode != "RGB":
            img = img.convert("RGB")
        img.thumbnail((transform.max_width, transform.max_height), Image.LANCZOS)

        buf = BytesIO()
        img.save(buf, format=transform.format, quality=transform.quality, optimize=True)
        return buf.getvalue()


class StorageImageStore(ImageStore):
    """
    Stores images through a Django storage backend (filesystem, S3, in-memory...).
    """

    EXTENSIONS = {"JPEG": "jpg", "PNG": "png", "WEBP": "webp"}

    def __init__(self, storage=None):
        self.storage = storage or default_storage

    def upload(self, data: bytes, folder: str, transform: ImageTransform) -> StoredImage:
        try:
            processed = apply_transform(data, transform)
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            raise ImageStoreError(f"Could not process image: {e}") from e

        extension = self.EXTENSIONS.get(transform.format, transform.format.lower())
        name = f"{folder}/{uuid.uuid4().hex}.{extension}"

        try:
            stored_name = self.storage.save(name, ContentFile(processed))
            url = self.storage.url(stored_name)
        except Exception as e:
            raise ImageStoreError(f"Storage backend failed: {e}") from e

        logger.info(f"Image stored at {stored_name} ({len(processed)} bytes)")
        return StoredImage(url=url, id=stored_name)
