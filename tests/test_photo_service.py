"""
Unit tests for photo compression, the object store client and PhotoService.
"""

import io
from unittest.mock import Mock

import pytest
import requests
from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image

from camp import stages
from camp.services.photo_service import PhotoService
from camp.storage import ObjectStoreClient, ObjectStoreError, compress_photo


class TestCompressPhoto:
    """Test cases for compress_photo."""

    def test_small_photo_stays_jpeg(self, jpeg_bytes):
        """Test small photo stays jpeg."""
        blob = compress_photo(jpeg_bytes())

        image = Image.open(io.BytesIO(blob))
        assert image.format == "JPEG"
        assert image.size == (64, 48)

    def test_wide_photo_is_scaled_to_max_width(self, jpeg_bytes):
        """Test wide photo is scaled to max width."""
        blob = compress_photo(jpeg_bytes(width=2000, height=1000), max_width=1280)

        image = Image.open(io.BytesIO(blob))
        assert image.size == (1280, 640)

    def test_png_is_converted(self):
        """Test png is converted."""
        buffer = io.BytesIO()
        Image.new("RGBA", (32, 32), (0, 0, 255, 128)).save(buffer, format="PNG")

        blob = compress_photo(buffer.getvalue())

        assert Image.open(io.BytesIO(blob)).format == "JPEG"

    def test_noisy_photo_shrinks_towards_target(self):
        """Test noisy photo shrinks towards target."""
        noise = Image.effect_noise((1600, 1200), 100).convert("RGB")
        buffer = io.BytesIO()
        noise.save(buffer, format="PNG")

        blob = compress_photo(buffer.getvalue(), target_kb=100, max_width=1280)

        assert len(blob) < len(buffer.getvalue())
        assert Image.open(io.BytesIO(blob)).width <= 1280

    def test_unreadable_upload(self):
        """Test unreadable upload."""
        assert compress_photo(b"not an image") is None


class TestObjectStoreClient:
    """Test cases for ObjectStoreClient."""

    def setup_method(self):
        """Set up test dependencies."""
        self.client = ObjectStoreClient(
            base_url="https://storage.test/", bucket="photos", service_key="key", timeout=5
        )

    def test_upload_returns_public_url(self, mock_object_store_post):
        """Test upload returns public url."""
        url = self.client.upload("before-1.jpg", b"data")

        assert url == "https://storage.test/storage/v1/object/public/photos/before-1.jpg"
        args, kwargs = mock_object_store_post.call_args
        assert args[0] == "https://storage.test/storage/v1/object/photos/before-1.jpg"
        assert kwargs["data"] == b"data"
        assert kwargs["headers"]["Authorization"] == "Bearer key"
        assert kwargs["headers"]["Content-Type"] == "image/jpeg"
        assert kwargs["timeout"] == 5

    def test_upload_rejected(self, mock_object_store_post):
        """Test upload rejected."""
        mock_object_store_post.return_value = Mock(status_code=400, text="Duplicate")

        with pytest.raises(ObjectStoreError):
            self.client.upload("before-1.jpg", b"data")

    def test_upload_unreachable(self, mocker):
        """Test upload unreachable."""
        mocker.patch(
            "camp.storage.object_store.requests.post",
            side_effect=requests.ConnectionError("refused"),
        )

        with pytest.raises(ObjectStoreError, match="refused"):
            self.client.upload("before-1.jpg", b"data")

    def test_defaults_from_settings(self):
        """Test defaults from settings."""
        client = ObjectStoreClient()

        assert client.public_url("x.jpg") == "https://storage.test/storage/v1/object/public/photos/x.jpg"


@pytest.mark.django_db
class TestPhotoService:
    """Test cases for uploading step photos."""

    def setup_method(self):
        """Set up test dependencies."""
        self.service = PhotoService()

    def _upload(self, jpeg_bytes, name="photo.jpg"):
        return SimpleUploadedFile(name, jpeg_bytes(), content_type="image/jpeg")

    def test_before_photo_advances_to_measurement(
        self, event, create_beneficiary, mock_object_store_post, jpeg_bytes
    ):
        """Test before photo advances to measurement."""
        beneficiary = create_beneficiary(stages.BEFORE_PHOTO)

        result = self.service.upload_step_photo(
            event.id, beneficiary.id, stages.BEFORE_PHOTO, self._upload(jpeg_bytes)
        )

        assert result["success"] is True
        beneficiary.refresh_from_db()
        assert beneficiary.current_step == stages.MEASUREMENT
        assert beneficiary.before_photo_url.startswith(
            "https://storage.test/storage/v1/object/public/photos/before-"
        )
        assert beneficiary.before_photo_url.endswith(".jpg")
        mock_object_store_post.assert_called_once()

    def test_after_photo_requires_volunteer(
        self, event, create_beneficiary, mock_object_store_post, jpeg_bytes
    ):
        """Test after photo requires volunteer."""
        beneficiary = create_beneficiary(stages.AFTER_PHOTO)

        result = self.service.upload_step_photo(
            event.id, beneficiary.id, stages.AFTER_PHOTO, self._upload(jpeg_bytes)
        )

        assert result["success"] is False
        assert "volunteer" in result["errors"]
        mock_object_store_post.assert_not_called()

    def test_after_photo_completes(
        self, event, create_beneficiary, mock_object_store_post, jpeg_bytes
    ):
        """Test after photo completes."""
        beneficiary = create_beneficiary(stages.AFTER_PHOTO, after_photo_url=None)

        result = self.service.upload_step_photo(
            event.id, beneficiary.id, stages.AFTER_PHOTO, self._upload(jpeg_bytes), volunteer="Meena"
        )

        assert result["success"] is True
        beneficiary.refresh_from_db()
        assert beneficiary.current_step == stages.COMPLETED
        assert "/after-" in beneficiary.after_photo_url
        assert beneficiary.step_volunteers[stages.AFTER_PHOTO] == "Meena"

    def test_wrong_step_uploads_nothing(
        self, event, create_beneficiary, mock_object_store_post, jpeg_bytes
    ):
        """Test wrong step uploads nothing."""
        beneficiary = create_beneficiary(stages.MEASUREMENT)

        result = self.service.upload_step_photo(
            event.id, beneficiary.id, stages.BEFORE_PHOTO, self._upload(jpeg_bytes)
        )

        assert result["success"] is False
        assert result["code"] == "conflict"
        mock_object_store_post.assert_not_called()

    def test_non_photo_step(self, event, create_beneficiary, mock_object_store_post, jpeg_bytes):
        """Test non photo step."""
        beneficiary = create_beneficiary(stages.MEASUREMENT)

        result = self.service.upload_step_photo(
            event.id, beneficiary.id, stages.MEASUREMENT, self._upload(jpeg_bytes)
        )

        assert result["code"] == "invalid"
        mock_object_store_post.assert_not_called()

    def test_store_failure_leaves_stage(
        self, event, create_beneficiary, mock_object_store_post, jpeg_bytes
    ):
        """Test store failure leaves stage."""
        mock_object_store_post.return_value = Mock(status_code=500, text="boom")
        beneficiary = create_beneficiary(stages.BEFORE_PHOTO)

        result = self.service.upload_step_photo(
            event.id, beneficiary.id, stages.BEFORE_PHOTO, self._upload(jpeg_bytes)
        )

        assert result["success"] is False
        assert result["code"] == "object_store_error"
        beneficiary.refresh_from_db()
        assert beneficiary.current_step == stages.BEFORE_PHOTO
        assert beneficiary.before_photo_url is None

    def test_unreadable_photo_uploaded_as_is(self, event, create_beneficiary, mock_object_store_post):
        """Test unreadable photo uploaded as is."""
        beneficiary = create_beneficiary(stages.BEFORE_PHOTO)
        upload = SimpleUploadedFile("scan.heic", b"raw-bytes", content_type="image/heic")

        result = self.service.upload_step_photo(
            event.id, beneficiary.id, stages.BEFORE_PHOTO, upload
        )

        assert result["success"] is True
        args, kwargs = mock_object_store_post.call_args
        assert args[0].endswith(".heic")
        assert kwargs["data"] == b"raw-bytes"
        assert kwargs["headers"]["Content-Type"] == "image/heic"

    def test_photo_name(self):
        """Test photo name."""
        name = self.service.photo_name(stages.BEFORE_PHOTO, "abc")

        assert name.startswith("before-abc-")
        assert name.endswith(".jpg")

    def test_photo_name_keeps_safe_extension(self):
        """Test that a plain extension of an unreadable upload is kept."""
        name = self.service.photo_name(stages.AFTER_PHOTO, "abc", "scan.HEIC", compressed=False)

        assert name.endswith(".heic")

    def test_photo_name_rejects_unsafe_extension(self):
        """Test that an extension with URL characters falls back to bin."""
        name = self.service.photo_name(stages.BEFORE_PHOTO, "abc", "scan.x#y", compressed=False)

        assert name.endswith(".bin")
        assert "#" not in name

    def test_photo_name_without_extension(self):
        """Test that an unreadable upload without an extension is stored as bin."""
        name = self.service.photo_name(stages.BEFORE_PHOTO, "abc", "scan", compressed=False)

        assert name.endswith(".bin")

    def test_unsafe_name_uploaded_under_public_name(
        self, event, create_beneficiary, mock_object_store_post
    ):
        """Test that the stored object name matches the saved public URL."""
        beneficiary = create_beneficiary(stages.BEFORE_PHOTO)
        upload = SimpleUploadedFile("scan.x#y", b"raw-bytes", content_type="image/x-unknown")

        result = self.service.upload_step_photo(event.id, beneficiary.id, stages.BEFORE_PHOTO, upload)

        assert result["success"] is True
        args, _ = mock_object_store_post.call_args
        object_name = args[0].rsplit("/", 1)[-1]
        beneficiary.refresh_from_db()
        assert beneficiary.before_photo_url.endswith("/" + object_name)
        assert object_name.endswith(".bin")
