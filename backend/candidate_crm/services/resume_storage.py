"""
Supabase Storage gateway for resume files.

Talks to the Storage REST API directly with httpx. All objects live in a
single bucket, under ``<sanitized user id>/resumes/``.
"""
import logging
import re
import time
from typing import Optional

import httpx

from ..errors import NotFound, StorageReadError, StorageWriteError

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9-]")
_EXTENSION = re.compile(r"\.[^/.]+$")


def sanitize(value: str) -> str:
    """Replace every character outside [a-zA-Z0-9-] with a hyphen."""
    return _UNSAFE_CHARS.sub("-", value)


def user_namespace(user_id: str) -> str:
    return f"{sanitize(user_id)}/resumes/"


def build_resume_path(user_id: str, filename: str, timestamp_ms: Optional[int] = None) -> str:
    """
    ``<user>/resumes/<epoch-ms>-<basename>.<ext>``; the timestamp prefix is
    what keeps two uploads of the same file apart.
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    basename = _EXTENSION.sub("", filename)
    extension = filename.rsplit(".", 1)[1] if "." in filename else "pdf"
    return f"{user_namespace(user_id)}{timestamp_ms}-{sanitize(basename)}.{extension}"


class ResumeStorage:
    """Upload, locate, sign and delete resume objects."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        supabase_url: str,
        service_key: str,
        bucket: str = "resumes",
        signed_url_expires_in: int = 604800,
    ):
        self.client = client
        self.supabase_url = supabase_url.rstrip("/")
        self.service_key = service_key
        self.bucket = bucket
        self.signed_url_expires_in = signed_url_expires_in

    @property
    def configured(self) -> bool:
        return bool(self.supabase_url and self.service_key)

    def _headers(self, **extra) -> dict:
        return {
            "Authorization": f"Bearer {self.service_key}",
            "apikey": self.service_key,
            **extra,
        }

    def _url(self, *parts: str) -> str:
        return "/".join([f"{self.supabase_url}/storage/v1", *parts])

    async def upload(
        self,
        user_id: str,
        filename: str,
        content: bytes,
        content_type: str = "application/pdf",
    ) -> str:
        """
        Store a new resume object and return its path within the bucket.

        Never overwrites: an existing object at the same path is a failure.

        Raises:
            StorageWriteError
        """
        if not self.configured:
            raise StorageWriteError("Supabase configuration missing")

        path = build_resume_path(user_id, filename)
        try:
            response = await self.client.post(
                self._url("object", self.bucket, path),
                headers=self._headers(**{
                    "Content-Type": content_type or "application/octet-stream",
                    "Content-Length": str(len(content)),
                    "x-upsert": "false",
                }),
                content=content,
            )
        except httpx.TimeoutException:
            logger.error(f"Timeout uploading resume to {path}")
            raise StorageWriteError("Upload timeout - storage did not respond")
        except httpx.HTTPError as e:
            logger.error(f"Error uploading resume to {path}: {e}")
            raise StorageWriteError("Failed to upload resume")

        if response.status_code not in (200, 201):
            error_detail = response.text[:500] if response.text else "Unknown error"
            logger.error(f"Supabase upload failed ({response.status_code}) for {path}: {error_detail}")
            raise StorageWriteError("Failed to upload resume")

        logger.info(f"Resume uploaded to {self.bucket}/{path} ({len(content)} bytes)")
        return path

    async def exists(self, path: str) -> bool:
        """
        List the parent folder and look for an exact filename match.

        Raises:
            StorageReadError
        """
        if not self.configured:
            raise StorageReadError("Supabase configuration missing")

        folder, _, name = path.rpartition("/")
        try:
            response = await self.client.post(
                self._url("object", "list", self.bucket),
                headers=self._headers(),
                json={"prefix": folder, "search": name, "limit": 100, "offset": 0},
            )
        except httpx.HTTPError as e:
            logger.error(f"Error checking if file exists at {path}: {e}")
            raise StorageReadError(f"Error checking if file exists: {e}")

        if response.status_code != 200:
            logger.error(f"Supabase list failed ({response.status_code}) for {folder}")
            raise StorageReadError(f"Error checking if file exists: HTTP {response.status_code}")

        return any(entry.get("name") == name for entry in response.json())

    async def resolve_url(self, path: str) -> str:
        """
        Mint a time-limited signed URL for an existing object.

        Raises:
            NotFound: nothing is stored at ``path``
            StorageReadError
        """
        logger.info(f"Attempting to get signed URL for: {path}")
        if not await self.exists(path):
            logger.warning(f"Resume file not found: {path}")
            raise NotFound("Resume file not found in storage")

        try:
            response = await self.client.post(
                self._url("object", "sign", self.bucket, path),
                headers=self._headers(),
                json={"expiresIn": self.signed_url_expires_in},
            )
        except httpx.HTTPError as e:
            logger.error(f"Error creating signed URL for {path}: {e}")
            raise StorageReadError(f"Failed to get resume URL: {e}")

        if response.status_code != 200:
            logger.error(f"Supabase sign failed ({response.status_code}) for {path}")
            raise StorageReadError(f"Failed to get resume URL: HTTP {response.status_code}")

        signed_path = response.json().get("signedURL")
        if not signed_path:
            raise StorageReadError("Failed to get resume URL: empty signature")
        return f"{self.supabase_url}/storage/v1{signed_path}"

    async def delete(self, path: str) -> None:
        """
        Remove an object. Deleting something that is not there succeeds.

        Raises:
            StorageWriteError
        """
        if not self.configured:
            raise StorageWriteError("Supabase configuration missing")

        try:
            response = await self.client.request(
                "DELETE",
                self._url("object", self.bucket),
                headers=self._headers(),
                json={"prefixes": [path]},
            )
        except httpx.HTTPError as e:
            logger.error(f"Error deleting resume {path}: {e}")
            raise StorageWriteError("Failed to delete resume")

        if response.status_code != 200:
            logger.error(f"Supabase delete failed ({response.status_code}) for {path}")
            raise StorageWriteError("Failed to delete resume")
        logger.info(f"Resume deleted: {self.bucket}/{path}")
