import contextlib
import os
import tempfile
from pathlib import Path

import structlog

from artserve.config import settings
from artserve.core.exceptions import FetchError

logger = structlog.get_logger()

TMP_PREFIX = ".artserve-"
TMP_SUFFIX = ".tmp"


class ImageStore:
    """Directory of downloaded images keyed by the file name taken from their URL.

    Writes go through a temporary file and an atomic rename, so concurrent
    saves of the same name leave exactly one complete copy behind. Which one
    wins is not defined.
    """

    def __init__(self, root: Path, max_files: int | None = None) -> None:
        self.root = root
        self.max_files = max_files

    def ensure_dir(self) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def path_for(self, filename: str) -> Path:
        return self.root / filename

    def save(self, filename: str, data: bytes) -> Path:
        target = self.path_for(filename)
        tmp_name: str | None = None
        try:
            self.ensure_dir()
            with tempfile.NamedTemporaryFile(
                dir=self.root, prefix=TMP_PREFIX, suffix=TMP_SUFFIX, delete=False
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(data)
            os.replace(tmp_name, target)
        except OSError as e:
            if tmp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
            logger.error("image_save_failed", path=str(target), error=str(e))
            raise FetchError(f"Failed to save image: {e}") from e

        logger.info("image_saved", path=str(target), size=len(data))
        if self.max_files is not None:
            self.prune(self.max_files)
        return target

    def list_images(self) -> list[Path]:
        if not self.root.exists():
            return []
        return [p for p in self.root.iterdir() if p.is_file() and not _is_temporary(p)]

    def prune(self, keep: int) -> int:
        images = sorted(self.list_images(), key=_mtime, reverse=True)
        count = 0
        for image_file in images[keep:]:
            try:
                image_file.unlink()
                count += 1
            except FileNotFoundError:
                continue
        if count:
            logger.info("images_pruned", count=count, keep=keep)
        return count


def _is_temporary(path: Path) -> bool:
    return path.name.startswith(TMP_PREFIX) and path.name.endswith(TMP_SUFFIX)


def _mtime(path: Path) -> float:
    try:
        return path.stat().st_mtime
    except FileNotFoundError:
        return 0.0


_store: ImageStore | None = None


def get_image_store() -> ImageStore:
    global _store
    if _store is None:
        _store = ImageStore(Path(settings.images_path), max_files=settings.max_saved_images)
    return _store


def reset_image_store() -> None:
    global _store
    _store = None
