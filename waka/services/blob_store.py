"""
File-tree blob store for uploaded audio and cover art.

Each asset kind has its own directory. Assets are written once under a
generated key and never modified; the key is the only identity an asset
has, and is what a Track row stores.
"""
import enum
import logging
import os
import re
import time
from dataclasses import dataclass
from pathlib import Path

from starlette.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)

WHITESPACE = re.compile(r"\s+")


class AssetKind(str, enum.Enum):
    """Upload field an asset came from; decides its directory."""
    AUDIO = "audio"
    COVER = "cover"


@dataclass(frozen=True)
class AssetHandle:
    """A stored asset: which store directory, and the key inside it."""
    kind: AssetKind
    key: str


def sanitize_filename(original_name: str | None) -> str:
    """Keep only the basename and replace whitespace runs with underscores."""
    name = os.path.basename((original_name or "").replace("\\", "/"))
    name = WHITESPACE.sub("_", name)
    return name or "upload"


class BlobStore:
    """Stores asset bytes on disk, one directory per AssetKind."""

    def __init__(self, audio_dir: str | Path, cover_dir: str | Path):
        self._dirs = {
            AssetKind.AUDIO: Path(audio_dir),
            AssetKind.COVER: Path(cover_dir),
        }

    def directory(self, kind: AssetKind) -> Path:
        return self._dirs[kind]

    def ensure_directories(self) -> None:
        """Create the asset directories if they are missing."""
        for path in self._dirs.values():
            path.mkdir(parents=True, exist_ok=True)

    def path_for(self, handle: AssetHandle) -> Path:
        return self._dirs[handle.kind] / handle.key

    async def save(self, kind: AssetKind, original_name: str | None, data: bytes) -> AssetHandle:
        """
        Write a new asset and return its handle.

        The key is `<microsecond timestamp>-<sanitized original name>`.
        The file is created exclusively; if the key is already taken the
        timestamp is bumped until a free key is found, so two saves never
        share a key even when the timestamp and name coincide.
        """
        handle = await run_in_threadpool(self._write_exclusive, kind, sanitize_filename(original_name), data)
        logger.info(f"[BlobStore] Stored {kind.value} asset {handle.key} ({len(data)} bytes)")
        return handle

    def _timestamp(self) -> int:
        return time.time_ns() // 1000

    def _write_exclusive(self, kind: AssetKind, name: str, data: bytes) -> AssetHandle:
        directory = self._dirs[kind]
        stamp = self._timestamp()
        while True:
            key = f"{stamp}-{name}"
            path = directory / key
            try:
                fh = open(path, "xb")
            except FileExistsError:
                stamp += 1
                continue
            try:
                with fh:
                    fh.write(data)
            except OSError:
                # Never leave a truncated asset behind
                path.unlink(missing_ok=True)
                raise
            return AssetHandle(kind=kind, key=key)

    async def exists(self, handle: AssetHandle) -> bool:
        return await run_in_threadpool(self.path_for(handle).is_file)

    async def delete(self, handle: AssetHandle) -> bool:
        """Remove an asset. Returns False if it was already gone."""
        try:
            await run_in_threadpool(self.path_for(handle).unlink)
        except FileNotFoundError:
            return False
        logger.info(f"[BlobStore] Deleted {handle.kind.value} asset {handle.key}")
        return True
