# ==== ATTACHMENT FILE STORE ==== #

"""
Local disk storage for uploaded attachments.

Files are written under the configured upload directory with a name built
from the form field and the upload time, and served read-only under
``/uploads``. Only the stored name is kept in the database.
"""

import re
import shutil
import time
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from procurement.observability.logging import get_logger
from procurement.settings import settings


logger = get_logger(__name__)

# Multipart field that carries untyped attachments
GENERIC_ATTACHMENT_FIELD = "attachments"


@dataclass(frozen=True)
class StoredFile:
    """A file written to the store, ready to be recorded as an attachment."""
    file_path: str
    original_name: Optional[str]
    document_type: Optional[str]


def document_type_for_field(field_name: str) -> Optional[str]:
    """Map a multipart field name to the attachment's document type."""
    if field_name == GENERIC_ATTACHMENT_FIELD:
        return None
    return field_name.strip().upper() or None


class LocalFileStore:
    """Attachment store backed by a local directory."""

    def __init__(self, root: str | Path):
        self.root = Path(root)
        self._written: list[str] = []

    def _write(self, field_name: str, upload: UploadFile) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        suffix = Path(upload.filename or "").suffix
        safe_field = re.sub(r"[^A-Za-z0-9_-]", "_", field_name) or "file"
        stem = f"{safe_field}-{int(time.time() * 1000)}"

        # Exclusive create claims the name; a concurrent writer moves on
        counter = 0
        while True:
            name = f"{stem}-{counter}{suffix}" if counter else f"{stem}{suffix}"
            target = self.root / name
            try:
                out = target.open("xb")
            except FileExistsError:
                counter += 1
                continue
            with out:
                upload.file.seek(0)
                shutil.copyfileobj(upload.file, out)
            return target

    async def save(self, field_name: str, upload: UploadFile) -> StoredFile:
        """
        Write one uploaded file to disk.

        Args:
            field_name: Multipart field the file arrived in
            upload: The uploaded file

        Returns:
            StoredFile: Stored name, original name and document type
        """
        target = await run_in_threadpool(self._write, field_name, upload)
        self._written.append(target.name)
        logger.debug("Stored attachment", file_path=target.name, field=field_name)
        return StoredFile(
            file_path=target.name,
            original_name=upload.filename,
            document_type=document_type_for_field(field_name),
        )

    async def save_all(self, uploads: list[tuple[str, UploadFile]]) -> list[StoredFile]:
        """Store every upload in order."""
        return [await self.save(field, upload) for field, upload in uploads]

    def delete(self, file_path: str) -> bool:
        """
        Remove a stored file.

        Failures are logged, not raised: the database row is the source of
        truth and has already been removed by the caller.

        Returns:
            bool: True when a file was removed
        """
        target = self.root / Path(file_path).name
        try:
            target.unlink()
        except FileNotFoundError:
            logger.warning("Attachment file already missing", file_path=file_path)
            return False
        except OSError as e:
            logger.error("Failed to remove attachment file", file_path=file_path, error=str(e))
            return False
        logger.info("Attachment file removed", file_path=file_path)
        return True

    @contextmanager
    def discard_on_error(self) -> Iterator[None]:
        """
        Remove files saved inside the block when the block raises.

        Wrap a whole unit of work, commit included, so a rolled back
        transaction leaves no stored file without an attachment row.
        """
        start = len(self._written)
        try:
            yield
        except Exception:
            discarded = self._written[start:]
            del self._written[start:]
            if discarded:
                logger.warning("Discarding uploads of failed write", count=len(discarded))
            for file_path in discarded:
                self.delete(file_path)
            raise


def get_file_store() -> LocalFileStore:
    """FastAPI dependency returning the configured file store."""
    return LocalFileStore(settings.UPLOAD_DIR)
