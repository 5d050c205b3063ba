"""
Document intake: accepts identity images, delegates storage and
records the resulting URLs on the buyer.
"""
import logging

from django.utils import timezone

from apps.buyers.models import Buyer
from common.exceptions import MissingFields, NotFound, UploadFailed, ValidationError
from common.services.images import ImageStoreError, ImageTransform, StoredImage
from common.validators import decode_image_payload

logger = logging.getLogger(__name__)


class DocumentIntake:
    """Service for verification image uploads"""

    # image type -> Buyer field that receives the URL
    IMAGE_FIELDS = {
        "id-front": "id_front_url",
        "id-back": "id_back_url",
        "selfie": "selfie_url",
    }
    FOLDER_PREFIX = "kudora-verification"
    TRANSFORM = ImageTransform(max_width=1000, max_height=1000, quality=85, format="JPEG")

    def __init__(self, image_store):
        self.image_store = image_store

    def upload_verification_image(self, image_data, image_type, buyer_id=None) -> StoredImage:
        """
        Store an identity image and optionally attach it to a buyer.

        Args:
            image_data: base64 string or data URI
            image_type: one of id-front, id-back, selfie
            buyer_id: buyer whose document field receives the URL (optional)

        Raises:
            MissingFields: image data or type absent
            ValidationError: unknown type or payload that is not an image
            NotFound: buyer_id does not exist
            UploadFailed: the image store errored; the buyer is left untouched
        """
        missing = [name for name, value in (("imageData", image_data), ("imageType", image_type)) if not value]
        if missing:
            raise MissingFields(missing)

        if image_type not in self.IMAGE_FIELDS:
            raise ValidationError(
                f"Image type must be one of: {', '.join(self.IMAGE_FIELDS)}",
                field="imageType"
            )

        if not isinstance(image_data, str):
            raise ValidationError("Image data must be a base64 string", field="imageData")

        raw = decode_image_payload(image_data)

        if buyer_id is not None:
            buyer_id = self._resolve_buyer(buyer_id)

        logger.info(f"📷 Uploading {image_type} image ({len(raw)} bytes)")
        try:
            stored = self.image_store.upload(raw, f"{self.FOLDER_PREFIX}/{image_type}", self.TRANSFORM)
        except ImageStoreError as e:
            logger.error(f"❌ Image upload error: {e}")
            raise UploadFailed()

        if buyer_id is not None:
            Buyer.objects.filter(id=buyer_id).update(
                **{self.IMAGE_FIELDS[image_type]: stored.url, "updated_at": timezone.now()}
            )
            logger.info(f"Buyer {buyer_id} {image_type} document recorded")

        return stored

    @staticmethod
    def _resolve_buyer(buyer_id):
        try:
            buyer_id = int(buyer_id)
        except (TypeError, ValueError):
            raise ValidationError("Buyer id must be an integer", field="userId")

        if not Buyer.objects.filter(id=buyer_id).exists():
            raise NotFound("Buyer not found")
        return buyer_id
