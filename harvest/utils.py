import hashlib
from datetime import datetime, timezone
from pathlib import Path
from typing import AsyncGenerator

import aiofiles


async def read_file(file_path: Path) -> bytes:
    async with aiofiles.open(file_path, "rb") as f:
        return await f.read()


async def read_in_chunks(file_path: Path, chunk_size: int = 65536) -> AsyncGenerator[bytes, None]:
    """
    read a binary file in chunks.
    """
    async with aiofiles.open(file_path, "rb") as f:
        while chunk := await f.read(chunk_size):
            yield chunk


async def md5_checksum(file_path: Path) -> str:
    digest = hashlib.md5()
    async for chunk in read_in_chunks(file_path):
        digest.update(chunk)
    return digest.hexdigest()


def to_iso_utc(timestamp: float) -> str:
    """Format a POSIX timestamp as ISO-8601 UTC with a trailing Z."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
