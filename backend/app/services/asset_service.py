"""
Travel Journal Backend — Image Asset Service
==============================================

What:  Stores uploaded images under the uploads root and deletes them by URL.
Why:   Centralizes every file system operation that user input can reach.
How:   uuid4 file names, async writes with aiofiles, and deletion restricted
       to bare file names inside the uploads root.
Who:   /image-upload and /delete-image routes; TravelBlogService.delete.

Security Model:
    1. Extension allow-list: only image types the frontend can render
    2. Size limit: MAX_FILE_SIZE, checked before touching the disk
    3. uuid4 file names: no user input ends up in a stored path
    4. Delete by bare name: the directory part of a caller-supplied URL is
       discarded, so "../../etc/passwd" can only ever mean
       <uploads_root>/passwd

Deletion contract:
    delete() never raises for I/O problems. It returns an AssetDeletion and
    the caller decides whether a failure matters: /delete-image turns it into
    a 500, entry deletion logs it and carries on.
"""

import logging
import uuid
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Optional
from urllib.parse import unquote, urlsplit

import aiofiles
import aiofiles.os

from app.config import settings
from app.exceptions import FileStorageError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp"}


@dataclass(frozen=True)
class StoredAsset:
    filename: str
    url: str


@dataclass(frozen=True)
class AssetDeletion:
    """
    Outcome of a delete request.

    deleted=False with error=None means there was nothing to delete.
    """

    filename: str
    deleted: bool
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class AssetService:
    """
    Manages the uploads directory.

    Directory Structure (flat, so a URL's last segment identifies the file):
        uploads/
        ├── 1c9e0f3a6b2d4e8f9a7b5c3d1e0f2a4b.jpg
        └── 7a2b4c6d8e0f1a3b5c7d9e1f3a5b7c9d.png
    """

    def __init__(
        self,
        uploads_root: Optional[str] = None,
        public_base_url: Optional[str] = None,
        max_file_size: Optional[int] = None,
    ):
        self.uploads_root = Path(uploads_root or settings.uploads_dir).resolve()
        self.public_base_url = (public_base_url or settings.public_base_url).rstrip("/")
        self.max_file_size = max_file_size or settings.max_file_size
        self.uploads_root.mkdir(parents=True, exist_ok=True)
        logger.info("AssetService initialized with uploads_root=%s", self.uploads_root)

    # ── Validation ────────────────────────────────────────────────────────

    def _validate_extension(self, filename: Optional[str]) -> str:
        ext = Path(filename or "").suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                message=(
                    f"File type '{ext or 'unknown'}' is not supported. "
                    f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
                ),
                field="image",
                context={"extension": ext},
            )
        # One canonical spelling for JPEG on disk
        return ".jpg" if ext == ".jpeg" else ext

    def _validate_size(self, content: bytes) -> None:
        if len(content) > self.max_file_size:
            max_mb = self.max_file_size / (1024 * 1024)
            raise ValidationError(
                message=f"Image is too large. Maximum size is {max_mb:.0f}MB.",
                field="image",
                context={"actual_size": len(content)},
            )

    # ── Store ─────────────────────────────────────────────────────────────

    def url_for(self, filename: str) -> str:
        return f"{self.public_base_url}/uploads/{filename}"

    async def store(self, content: Optional[bytes], filename: Optional[str]) -> StoredAsset:
        """
        Persist an uploaded image and return its public URL.

        Raises:
            ValidationError: no payload, unsupported type, or too large
            FileStorageError: the write failed
        """
        if not content:
            raise ValidationError("No image uploaded", field="image")

        ext = self._validate_extension(filename)
        self._validate_size(content)

        stored_name = f"{uuid.uuid4().hex}{ext}"
        path = self.uploads_root / stored_name

        try:
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store image at %s: %s", path, e)
            raise FileStorageError(
                message="Failed to save uploaded image. Please try again.",
                context={"path": str(path), "os_error": str(e)},
            ) from e

        logger.info("Image stored: %s (%d bytes)", stored_name, len(content))
        return StoredAsset(filename=stored_name, url=self.url_for(stored_name))

    # ── Delete ────────────────────────────────────────────────────────────

    @staticmethod
    def filename_from_url(url: Optional[str]) -> str:
        """
        Bare file name referenced by `url`, or "" if there is none.

        Accepts absolute URLs, root-relative paths, and bare names. Both
        slash styles count as separators; "." and ".." never name a file.
        """
        if not url:
            return ""
        path = unquote(urlsplit(url).path).replace("\\", "/")
        if path.endswith("/"):
            return ""
        name = PurePosixPath(path).name
        if name in ("", ".", ".."):
            return ""
        return name

    async def delete(self, url: Optional[str]) -> AssetDeletion:
        """
        Remove the upload that `url` points at, if it exists.

        Missing files are not an error. OS failures are reported in the
        returned AssetDeletion instead of being raised.
        """
        filename = self.filename_from_url(url)
        if not filename:
            return AssetDeletion(filename="", deleted=False)

        path = self.uploads_root / filename
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            logger.debug("Delete: image already gone: %s", filename)
            return AssetDeletion(filename=filename, deleted=False)
        except OSError as e:
            return AssetDeletion(filename=filename, deleted=False, error=str(e))

        logger.info("Image deleted: %s", filename)
        return AssetDeletion(filename=filename, deleted=True)


# ── Singleton Instance ────────────────────────────────────────────────────
asset_service = AssetService()
