"""
Cloud Storage for Firebase.

Objects are written through the google-cloud-storage bucket that
firebase_admin exposes. Download URLs use Firebase's token scheme: a random
token stored in the object's ``firebaseStorageDownloadTokens`` metadata
grants read access through the firebasestorage.googleapis.com endpoint.
"""

import logging
import uuid
from typing import Any, Dict, Optional, Union
from urllib.parse import quote

from firebase_admin import storage

from .._async import run_sync

logger = logging.getLogger(__name__)

DOWNLOAD_TOKENS_KEY = "firebaseStorageDownloadTokens"

DOWNLOAD_URL_TEMPLATE = (
    "https://firebasestorage.googleapis.com/v0/b/{bucket}/o/{path}?alt=media&token={token}"
)

DEFAULT_CONTENT_TYPE = "application/octet-stream"

FileContent = Union[bytes, bytearray, memoryview, str]


def _first_token(metadata: Optional[Dict[str, str]]) -> Optional[str]:
    tokens = (metadata or {}).get(DOWNLOAD_TOKENS_KEY)
    if not tokens:
        return None
    return tokens.split(",")[0].strip() or None


class BlobStore:
    """
    File operations on one storage bucket.

    Args:
        app: firebase_admin app (its storageBucket option is the default)
        bucket_name: Bucket to use instead of the app default
        bucket: Pre-built google.cloud.storage Bucket (skips lookup)
    """

    def __init__(self, app: Any = None, bucket_name: Optional[str] = None, bucket: Any = None):
        self._bucket = bucket if bucket is not None else storage.bucket(bucket_name, app=app)

    @property
    def bucket(self) -> Any:
        return self._bucket

    def download_url(self, path: str, token: str) -> str:
        return DOWNLOAD_URL_TEMPLATE.format(
            bucket=self._bucket.name,
            path=quote(path, safe=""),
            token=token,
        )

    async def upload(
        self, path: str, content: FileContent, content_type: Optional[str] = None
    ) -> Dict[str, str]:
        """Upload content to ``path`` and return {"path", "url"}."""
        if isinstance(content, (bytearray, memoryview)):
            content = bytes(content)

        token = str(uuid.uuid4())
        blob = self._bucket.blob(path)
        blob.metadata = {DOWNLOAD_TOKENS_KEY: token}
        await run_sync(
            blob.upload_from_string,
            content,
            content_type=content_type or DEFAULT_CONTENT_TYPE,
        )
        logger.debug(f"Uploaded gs://{self._bucket.name}/{path}")
        return {"path": path, "url": self.download_url(path, token)}

    async def get_url(self, path: str) -> str:
        """
        Return the download URL for an existing object.

        Objects uploaded without a download token get one attached. Raises
        the backend's NotFound if the object does not exist.
        """
        blob = self._bucket.blob(path)
        await run_sync(blob.reload)

        token = _first_token(blob.metadata)
        if token is None:
            token = str(uuid.uuid4())
            blob.metadata = {**(blob.metadata or {}), DOWNLOAD_TOKENS_KEY: token}
            await run_sync(blob.patch)
            logger.debug(f"Attached download token to gs://{self._bucket.name}/{path}")

        return self.download_url(path, token)

    async def delete(self, path: str) -> bool:
        """Delete an object. Raises the backend's NotFound if it is absent."""
        await run_sync(self._bucket.blob(path).delete)
        logger.debug(f"Deleted gs://{self._bucket.name}/{path}")
        return True
