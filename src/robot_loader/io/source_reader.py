"""Read description sources as text, whatever their encoding."""

import logging
from pathlib import Path
from typing import Union

from robot_loader.errors import SourceReadError

logger = logging.getLogger(__name__)

# Code page 932 is the Shift-JIS superset written by Windows CAD exporters.
FALLBACK_ENCODING = "cp932"


def decode_source(data: bytes) -> str:
    """Decode bytes as strict UTF-8, falling back to lossy Shift-JIS."""
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data.decode(FALLBACK_ENCODING, errors="replace")


def read_text(path: Union[str, Path]) -> str:
    """Load a file as text.

    Args:
        path: File to read.

    Returns:
        The decoded file contents.

    Raises:
        SourceReadError: The file could not be read.
    """
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        logger.error("Failed to read file %s: %s", path, e)
        raise SourceReadError(path, str(e)) from e

    return decode_source(data)
