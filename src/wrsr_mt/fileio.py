"""File access helpers: typed errors on read, temp-file-and-rename on write."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from wrsr_mt.errors import FileIOError

logger = logging.getLogger(__name__)

TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "surrogateescape"


def read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise FileIOError(path, e) from e


def read_text(path: Path, encoding: str = TEXT_ENCODING) -> str:
    """Decode a text file so that undecodable bytes survive re-encoding."""
    return read_bytes(path).decode(encoding, TEXT_ERRORS)


def encode_text(text: str, encoding: str = TEXT_ENCODING) -> bytes:
    return text.encode(encoding, TEXT_ERRORS)


def write_bytes(path: Path, data: bytes) -> None:
    """Write ``data`` next to ``path`` under a temporary name, then rename into place."""
    tmp = path.with_name(f".{path.name}.tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_bytes(data)
        os.replace(tmp, path)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        raise FileIOError(path, e) from e
    logger.debug("Wrote %d bytes to %s", len(data), path)


def write_text(path: Path, text: str, encoding: str = TEXT_ENCODING) -> None:
    write_bytes(path, encode_text(text, encoding))
