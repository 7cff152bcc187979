from .images import compress_photo
from .object_store import ObjectStoreClient, ObjectStoreError

__all__ = ["compress_photo", "ObjectStoreClient", "ObjectStoreError"]
