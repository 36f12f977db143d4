from pathlib import Path
from typing import Sequence

from loguru import logger

from errors import IOFailure, ValidationError
from validators import check_collage_title

COLLAGE_FILENAME = "collage.txt"
MAX_COLLAGE_PHOTOS = 10


def format_collage(title: str, photo_titles: Sequence[str]) -> str:
    return f"Collage: {title} → {', '.join(photo_titles)}"


class CollageLog:
    """Append-only log of named collages. Never read back."""

    def __init__(self, log_path: Path) -> None:
        self._path = log_path

    @property
    def path(self) -> Path:
        return self._path

    def append(self, title: str, photo_titles: Sequence[str]) -> str:
        """Validate and append one collage line; return the line written."""
        title = check_collage_title(title)
        if not 1 <= len(photo_titles) <= MAX_COLLAGE_PHOTOS:
            raise ValidationError(
                f"A collage needs between 1 and {MAX_COLLAGE_PHOTOS} photos."
            )
        line = format_collage(title, photo_titles)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "a", encoding="utf-8", newline="\n") as f:
                f.write(line + "\n")
        except OSError as e:
            logger.error("Error saving collage to {}: {}", self._path, e)
            raise IOFailure(f"Error saving collage: {e}") from e
        logger.info("Collage '{}' saved with {} photos", title, len(photo_titles))
        return line

    @staticmethod
    def collage_path_for(data_dir: Path) -> Path:
        return data_dir / COLLAGE_FILENAME
