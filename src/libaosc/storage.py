"""Local persistence of downloaded package indexes."""

import logging
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager
from os import utime
from pathlib import Path
from typing import BinaryIO

import aiofiles
import aiofiles.os

from libaosc.control import parse_packages
from libaosc.decompress import decompress, is_xz
from libaosc.errors import IoError
from libaosc.models import Packages
from libaosc.utils import try_parse_date

logger = logging.getLogger(__name__)


@contextmanager
def open_destination(path: Path) -> Iterator[BinaryIO]:
    """Create the parent directory and open path for writing, truncating it.

    Any OSError raised while the file is open, including from writes done by the
    caller, is re-raised as IoError.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as f:
            yield f
    except OSError as e:
        raise IoError(f"Failed to write {path}: {e}") from e


@asynccontextmanager
async def open_destination_async(path: Path) -> AsyncIterator:
    """Asynchronous version of open_destination(), backed by aiofiles."""
    try:
        await aiofiles.os.makedirs(path.parent, exist_ok=True)
        async with aiofiles.open(path, "wb") as f:
            yield f
    except OSError as e:
        raise IoError(f"Failed to write {path}: {e}") from e


def set_mtime(path: Path, last_modified: str | None) -> None:
    """Stamp path with the server's Last-Modified time, if it sent a usable one."""
    if (remote_dt := try_parse_date(last_modified)) is None:
        return
    remote_ts = remote_dt.timestamp()
    try:
        utime(path, (remote_ts, remote_ts))
    except OSError as e:
        raise IoError(f"Failed to set modification time of {path}: {e}") from e


def load_packages(path: Path, compressed: bool | None = None) -> Packages:
    """Parse a previously downloaded Packages index from disk.

    Args:
        path: The persisted index file
        compressed: Whether the file is xz-compressed. None detects it from the magic bytes.

    Returns:
        The packages in the file
    """
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise IoError(f"Failed to read {path}: {e}") from e

    if compressed is None:
        compressed = is_xz(data)
        logger.debug(f"Detected {'xz-compressed' if compressed else 'plain'} index at {path}")
    return parse_packages(decompress(data, compressed))
