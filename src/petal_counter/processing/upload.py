"""Upload validation and display encoding."""

import base64
from dataclasses import dataclass
import logging

from petal_counter.core.config import ALLOWED_CONTENT_TYPES, MAX_FILE_SIZE
from petal_counter.core.exceptions import FileTooLargeError, InvalidFileTypeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedFile:
    """A file handed over by the user, before any decoding."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def validate_upload(file: UploadedFile) -> None:
    """
    Check the MIME type and size of an upload.

    The type is checked first, so a file that is both the wrong type and too
    large reports the type error.

    Raises:
        InvalidFileTypeError: If the content type is not an accepted image type
        FileTooLargeError: If the file is larger than MAX_FILE_SIZE
    """
    if file.content_type not in ALLOWED_CONTENT_TYPES:
        logger.warning(f"Rejected {file.filename!r}: unsupported type {file.content_type}")
        raise InvalidFileTypeError(details={"content_type": file.content_type})

    if file.size > MAX_FILE_SIZE:
        logger.warning(f"Rejected {file.filename!r}: {file.size} bytes exceeds limit")
        raise FileTooLargeError(details={"size": file.size, "max_size": MAX_FILE_SIZE})


def to_data_url(file: UploadedFile) -> str:
    """Encode the raw upload as a base64 data URL for display."""
    payload = base64.b64encode(file.data).decode("ascii")
    return f"data:{file.content_type};base64,{payload}"


def first_file(files: list[UploadedFile] | None) -> UploadedFile | None:
    """Pick the only file that gets processed from a drop or picker selection."""
    if not files:
        return None
    if len(files) > 1:
        logger.debug(f"Ignoring {len(files) - 1} additional file(s)")
    return files[0]
