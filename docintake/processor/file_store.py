import re
import shutil
import time
from collections.abc import Callable
from pathlib import Path, PurePath


def stored_filename(original_filename: str, timestamp_ms: int) -> str:
    """Build the stored file name: {timestamp_ms}-{name with whitespace as '-'}"""
    base = PurePath(original_filename.replace("\\", "/")).name
    safe_name = re.sub(r"\s+", "-", base)
    return f"{timestamp_ms}-{safe_name}"


class FileStore:
    """Moves accepted uploads into per-category directories."""

    UPLOADS_ROOT = Path("uploads")

    def __init__(
        self,
        uploads_root: Path | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._uploads_root = uploads_root if uploads_root is not None else self.UPLOADS_ROOT
        self._clock = clock

    def store(self, source: Path, original_filename: str, category: str) -> Path:
        """Move *source* to {uploads_root}/{category}/{timestamp_ms}-{filename}.

        Raises:
            FileNotFoundError: if *source* does not exist.
        """
        if not source.exists():
            raise FileNotFoundError(f"File not found: {source}")
        directory = self._uploads_root / category
        directory.mkdir(parents=True, exist_ok=True)
        target = directory / stored_filename(original_filename, int(self._clock() * 1000))
        shutil.move(str(source), target)
        return target
