import logging

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


class ObjectStoreError(Exception):
    """Raised when a photo could not be stored."""


class ObjectStoreClient:
    """
    Client for the bucket that holds beneficiary photos.

    Speaks the Supabase storage REST API: objects are uploaded under
    ``/storage/v1/object/<bucket>/<name>`` and served publicly from
    ``/storage/v1/object/public/<bucket>/<name>``.
    """

    def __init__(self, base_url=None, bucket=None, service_key=None, timeout=None):
        self.base_url = (base_url or settings.OBJECT_STORE_URL).rstrip("/")
        self.bucket = bucket or settings.OBJECT_STORE_BUCKET
        self.service_key = service_key if service_key is not None else settings.OBJECT_STORE_KEY
        self.timeout = timeout or settings.OBJECT_STORE_TIMEOUT

    def upload(self, name: str, content: bytes, content_type: str = "image/jpeg") -> str:
        """
        Upload a blob and return its public URL.

        Args:
            name: Object name inside the bucket
            content: Raw bytes to store
            content_type: MIME type sent with the object

        Returns:
            str: Publicly resolvable URL of the stored object

        Raises:
            ObjectStoreError: If the store is unreachable or rejects the upload
        """
        url = f"{self.base_url}/storage/v1/object/{self.bucket}/{name}"
        headers = {"Content-Type": content_type, "x-upsert": "false"}
        if self.service_key:
            headers["Authorization"] = f"Bearer {self.service_key}"
            headers["apikey"] = self.service_key

        try:
            response = requests.post(url, data=content, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Error uploading {name} to object store: {str(e)}")
            raise ObjectStoreError(f"Error uploading photo: {str(e)}") from e

        if response.status_code not in (200, 201):
            logger.error(
                f"Object store rejected {name}. Status: {response.status_code}, body: {response.text}"
            )
            raise ObjectStoreError(f"Error uploading photo: storage returned {response.status_code}")

        logger.info(f"Uploaded {name} ({len(content)} bytes) to bucket {self.bucket}")
        return self.public_url(name)

    def public_url(self, name: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{name}"
