# useraccounts/services/image_service.py
# Temporary storage of uploaded profile images and base64 conversion

import base64
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

logger = logging.getLogger(__name__)


def upload_extension(original_name: Optional[str], content_type: Optional[str]) -> str:
    """Extension for the on-disk copy, taken from the original name or MIME type."""
    extension = Path(original_name or "").suffix.lower()
    if not extension and content_type and "/" in content_type:
        extension = "." + content_type.split("/", 1)[1].lower()
    return extension


def image_to_base64(file_path: str) -> str:
    """Read an image file and return it as a data URI."""
    data = Path(file_path).read_bytes()
    extension = Path(file_path).suffix.lstrip(".").lower() or "jpeg"
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:image/{extension};base64,{encoded}"


@contextmanager
def temporary_upload(
    contents: bytes,
    upload_dir: str,
    original_name: Optional[str] = None,
    content_type: Optional[str] = None,
) -> Iterator[str]:
    """Write an upload to disk and remove it again on every exit path."""
    os.makedirs(upload_dir, exist_ok=True)
    path = None
    try:
        with tempfile.NamedTemporaryFile(
            dir=upload_dir, suffix=upload_extension(original_name, content_type), delete=False
        ) as handle:
            path = handle.name
            handle.write(contents)
        yield path
    finally:
        if path is not None:
            try:
                os.remove(path)
            except OSError as e:
                logger.error(f"Error deleting file {path}: {e}")
