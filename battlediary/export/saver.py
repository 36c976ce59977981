"""
Manual download sink.

The host injects a FileSaver. LocalFileSaver writes into a directory and
is the default for hosts without a browser-style download surface.
"""

import asyncio
import logging
from pathlib import Path
from typing import Protocol

from battlediary.config import settings
from battlediary.models.failure import SaveFailedError

logger = logging.getLogger(__name__)


class FileSaver(Protocol):
    """Triggers a local file save. Raises SaveFailedError on failure."""

    async def save(self, filename: str, data: bytes, media_type: str) -> None: ...


class LocalFileSaver:
    """Writes downloads into `directory`."""

    def __init__(self, directory: str | Path | None = None) -> None:
        self.directory = Path(directory if directory is not None else settings.download_dir)

    def path_for(self, filename: str) -> Path:
        # Deck names may contain path separators
        return self.directory / filename.replace("/", "_").replace("\\", "_")

    async def save(self, filename: str, data: bytes, media_type: str) -> None:
        path = self.path_for(filename)
        try:
            await asyncio.to_thread(self._write, path, data)
        except OSError as e:
            logger.error("Failed to save %s (%s): %s", path, media_type, e)
            raise SaveFailedError(filename=filename, detail=str(e)) from e

        logger.info("Saved %s (%d bytes)", path, len(data))

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
