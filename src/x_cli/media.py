"""Read local media files for the simple (non-chunked) upload endpoint.

The whole file is loaded and base64-encoded in memory in one pass, so the
practical size limit is whatever fits in memory as a base64 string. Chunked
uploads are not supported.
"""

import base64
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def resolve_media_path(path: str | Path) -> Path:
    """Absolute path; relative paths are taken from the current directory."""
    media_path = Path(path).expanduser()
    if not media_path.is_absolute():
        media_path = Path.cwd() / media_path
    return media_path


def encode_media_file(path: str | Path) -> str:
    """Return the file content as base64 text.

    Raises OSError (FileNotFoundError, PermissionError, ...) unchanged if
    the file cannot be read.
    """
    media_path = resolve_media_path(path)
    data = media_path.read_bytes()
    logger.debug("Read %d bytes from %s", len(data), media_path)
    return base64.b64encode(data).decode("ascii")
