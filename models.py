from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from errors import GalleryError

PHOTO_TYPES = ("jpg", "png")
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

SORT_BY_ID = "id"
SORT_BY_NAME = "name"
SORT_BY_DATETIME = "datetime"
SORT_KEYS = (SORT_BY_ID, SORT_BY_NAME, SORT_BY_DATETIME)


@dataclass
class PhotoRecord:
    id: int
    name: str
    type: str                # "jpg" or "png", lowercase
    folder: str
    date_time: str           # "YYYY-MM-DD HH:MM:SS"
    is_favourite: bool = False

    @property
    def title(self) -> str:
        return self.name

    def matches_title(self, title: str) -> bool:
        """Case-insensitive title comparison."""
        return self.name.lower() == title.lower()


@dataclass
class ImportSummary:
    source_path: str
    files_scanned: int = 0
    files_added: int = 0
    files_skipped: int = 0
    files_errored: int = 0
    errors: List[Tuple[str, str]] = field(default_factory=list)


@dataclass
class Outcome:
    """Result of one gallery operation, ready for the presentation layer."""
    ok: bool
    message: str
    records: List[PhotoRecord] = field(default_factory=list)
    changed: bool = False
    error: Optional[GalleryError] = None
    summary: Optional[ImportSummary] = None

    @property
    def record(self) -> Optional[PhotoRecord]:
        return self.records[0] if self.records else None

    @staticmethod
    def success(
        message: str,
        records: Optional[List[PhotoRecord]] = None,
        changed: bool = False,
    ) -> "Outcome":
        return Outcome(ok=True, message=message, records=list(records or []), changed=changed)

    @staticmethod
    def failure(error: GalleryError, records: Optional[List[PhotoRecord]] = None) -> "Outcome":
        return Outcome(ok=False, message=str(error), records=list(records or []), error=error)
