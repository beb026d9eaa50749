"""
app/services/storage_service.py

Purpose: Object storage for uploaded audio and images

- Stores files in GridFS buckets keyed by path
- Builds public URLs served by the files route
- Resolves our own public URLs back to (bucket, path) so the voice
  pipeline can read recordings without an HTTP round trip
"""

from typing import Optional, Tuple
from urllib.parse import unquote, urlparse

from gridfs.errors import NoFile

from app.core.config import settings
from app.core.exceptions import ConflictError, ResourceNotFoundError
from app.core.logging import get_logger
from app.db.mongo import get_gridfs_bucket
from utils.constants import STORAGE_BUCKETS

logger = get_logger(__name__)


class StorageService:
    """
    GridFS-backed object store. Each bucket is a separate GridFS bucket,
    each object is addressed by its path (the GridFS filename).
    """

    def _bucket(self, bucket: str):
        if bucket not in STORAGE_BUCKETS:
            raise ResourceNotFoundError(f"Unknown bucket: {bucket}")
        return get_gridfs_bucket(bucket)

    async def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str,
        upsert: bool = False
    ) -> str:
        """
        Stores bytes under `path`.

        Args:
            bucket: Bucket name
            path: Object path inside the bucket
            data: File contents
            content_type: MIME type served back on download
            upsert: Replace an existing object instead of failing

        Returns:
            The stored path

        Raises:
            ConflictError: If the path exists and upsert is False
        """
        grid = self._bucket(bucket)

        existing = [f._id async for f in grid.find({"filename": path})]
        if existing and not upsert:
            raise ConflictError(f"The resource already exists: {path}")

        await grid.upload_from_stream(
            path,
            data,
            metadata={"contentType": content_type}
        )
        for file_id in existing:
            await grid.delete(file_id)

        logger.info(f"Stored {bucket}/{path} ({len(data)} bytes)")
        return path

    async def download(self, bucket: str, path: str) -> Tuple[bytes, str]:
        """
        Returns (contents, content_type) of the newest revision of `path`.

        Raises:
            ResourceNotFoundError: If the object does not exist
        """
        grid = self._bucket(bucket)
        try:
            stream = await grid.open_download_stream_by_name(path)
        except NoFile:
            raise ResourceNotFoundError("File not found")

        data = await stream.read()
        metadata = stream.metadata or {}
        return data, metadata.get("contentType", "application/octet-stream")

    def public_url(self, bucket: str, path: str) -> str:
        return f"{settings.files_base_url}/{bucket}/{path}"

    def parse_public_url(self, url: str) -> Optional[Tuple[str, str]]:
        """
        Maps one of our own public URLs back to (bucket, path).

        Returns:
            (bucket, path) or None for foreign URLs
        """
        base = urlparse(settings.files_base_url)
        parsed = urlparse(url)
        if (parsed.scheme, parsed.netloc) != (base.scheme, base.netloc):
            return None

        prefix = base.path.rstrip("/") + "/"
        if not parsed.path.startswith(prefix):
            return None

        remainder = unquote(parsed.path[len(prefix):])
        bucket, _, path = remainder.partition("/")
        if bucket not in STORAGE_BUCKETS or not path:
            return None
        return bucket, path


# Global storage service instance
_storage_service: Optional[StorageService] = None


def get_storage_service() -> StorageService:
    """Get or create the global storage service instance."""
    global _storage_service
    if _storage_service is None:
        _storage_service = StorageService()
    return _storage_service
