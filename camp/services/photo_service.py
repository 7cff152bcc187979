import logging
import re
import time

from django.conf import settings

from camp import stages
from camp.services.stage_service import CONFLICT, INVALID, NOT_FOUND, OBJECT_STORE_ERROR, StageService
from camp.storage import ObjectStoreClient, ObjectStoreError, compress_photo

logger = logging.getLogger(__name__)

PHOTO_PREFIXES = {
    stages.BEFORE_PHOTO: "before",
    stages.AFTER_PHOTO: "after",
}

# Object names end up in a URL path
SAFE_EXTENSION = re.compile(r"[a-z0-9]{1,5}")


class PhotoService:
    """Uploads a step photo and advances the photo stage with its URL."""

    def __init__(self, object_store=None, stage_service=None):
        self.object_store = object_store or ObjectStoreClient()
        self.stage_service = stage_service or StageService()

    def upload_step_photo(self, event_id, beneficiary_id, step: str, photo, volunteer=None) -> dict:
        """
        Store a before/after photo and complete the photo stage.

        The beneficiary is checked before anything is uploaded, so a stale
        page does not leave orphaned photos behind.

        Args:
            event_id: The event scope
            beneficiary_id: The beneficiary's id
            step: before_photo or after_photo
            photo: Uploaded file object
            volunteer: Name of the volunteer taking the photo

        Returns:
            dict: Result of the stage transition, or a failure description
        """
        if step not in PHOTO_PREFIXES:
            return {"success": False, "code": INVALID, "message": f"Step {step} does not take a photo"}

        beneficiary = self.stage_service.get_beneficiary(event_id, beneficiary_id)
        if beneficiary is None:
            return {
                "success": False,
                "code": NOT_FOUND,
                "message": f"Beneficiary {beneficiary_id} not found",
            }
        if beneficiary.current_step != step:
            return {
                "success": False,
                "code": CONFLICT,
                "message": f"Beneficiary {beneficiary.reg_number} is at {beneficiary.current_step}, not {step}",
            }
        if step in stages.VOLUNTEER_REQUIRED_STEPS and not (volunteer or "").strip():
            return {
                "success": False,
                "code": INVALID,
                "message": "Please enter your volunteer name",
                "errors": {"volunteer": ["Please enter your volunteer name"]},
            }

        content = photo.read()
        compressed = compress_photo(
            content, target_kb=settings.PHOTO_TARGET_KB, max_width=settings.PHOTO_MAX_WIDTH
        )
        if compressed is not None:
            content_type = "image/jpeg"
            upload = compressed
        else:
            content_type = getattr(photo, "content_type", None) or "application/octet-stream"
            upload = content

        name = self.photo_name(step, beneficiary.pk, getattr(photo, "name", ""), compressed is not None)
        try:
            public_url = self.object_store.upload(name, upload, content_type=content_type)
        except ObjectStoreError as e:
            return {"success": False, "code": OBJECT_STORE_ERROR, "message": str(e)}

        logger.info(f"Stored {step} photo for {beneficiary.reg_number} at {public_url}")
        return self.stage_service.advance(
            event_id, beneficiary_id, step, {"photo_url": public_url}, volunteer=volunteer
        )

    def photo_name(self, step, beneficiary_id, original_name="", compressed=True) -> str:
        extension = "jpg"
        if not compressed:
            extension = "bin"
            if "." in (original_name or ""):
                candidate = original_name.rsplit(".", 1)[-1].lower()
                if SAFE_EXTENSION.fullmatch(candidate):
                    extension = candidate
        millis = int(time.time() * 1000)
        return f"{PHOTO_PREFIXES[step]}-{beneficiary_id}-{millis}.{extension}"
