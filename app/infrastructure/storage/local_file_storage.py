"""Local filesystem storage for rendered posters.

Storage layout:
    <output_dir>/poster-<epoch_microseconds>.png

File names are time-derived, so concurrent renders never write the same file.
"""

import logging
import re
import time
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

_POSTER_NAME = re.compile(r"^poster-\d+\.png$")


@dataclass
class StoredFile:
    """Result of storing a single poster on disk."""

    stored_path: str
    filename: str
    file_size: int
    mime_type: str


def _poster_filename() -> str:
    return f"poster-{time.time_ns() // 1_000}.png"


class LocalFileStorage:
    """Infrastructure adapter for persisted poster images."""

    def __init__(self, output_dir: str):
        self._output_dir = Path(output_dir)

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    async def store_poster(self, content: bytes) -> StoredFile:
        """Write poster bytes as ``poster-<stamp>.png``.

        The directory is (re)created before every write; another process may
        have cleaned up an ephemeral location such as /tmp.
        """
        self._output_dir.mkdir(parents=True, exist_ok=True)

        filename = _poster_filename()
        dest_path = self._output_dir / filename
        dest_path.write_bytes(content)

        logger.info("Stored poster: %s (%d bytes)", dest_path, len(content))

        return StoredFile(
            stored_path=str(dest_path),
            filename=filename,
            file_size=len(content),
            mime_type="image/png",
        )

    def resolve_poster(self, filename: str) -> Path | None:
        """Return the path of a stored poster, or None for unknown/invalid names."""
        if not _POSTER_NAME.match(filename):
            return None
        path = self._output_dir / filename
        if not path.is_file():
            return None
        return path
