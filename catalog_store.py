from datetime import datetime
from pathlib import Path
from typing import List, Optional

from loguru import logger

from catalog_codec import read_catalog, write_catalog
from errors import DuplicateError, IOFailure, NotFoundError, ValidationError
from models import (
    DATETIME_FORMAT,
    SORT_BY_DATETIME,
    SORT_BY_ID,
    SORT_BY_NAME,
    SORT_KEYS,
    PhotoRecord,
)
from validators import (
    check_datetime,
    check_folder_name,
    check_photo_name,
    check_photo_type,
)

CATALOG_FILENAME = "Photos.txt"


def _now() -> str:
    return datetime.now().strftime(DATETIME_FORMAT)


_SORT_FIELDS = {
    SORT_BY_ID: lambda r: r.id,
    SORT_BY_NAME: lambda r: r.name.lower(),
    SORT_BY_DATETIME: lambda r: r.date_time,
}


class CatalogStore:
    """
    Ordered photo records persisted to target_root/Photos.txt.

    Records keep insertion order. Ids are handed out from a monotonic
    counter on insert and renumbered 1..N after every deletion, so the
    counter never collides with a live record.

    Mutating methods only change memory; callers persist with save().
    """

    def __init__(self, catalog_path: Path) -> None:
        self._path = catalog_path
        self._records: List[PhotoRecord] = []
        self._next_id = 1
        self._load()

    def _load(self) -> None:
        try:
            self._records = read_catalog(self._path)
        except OSError as e:
            raise IOFailure(f"Error loading gallery {self._path}: {e}") from e
        self._next_id = max((r.id for r in self._records), default=0) + 1
        logger.debug("Loaded {} records from {}", len(self._records), self._path)

    # ── Lookup ────────────────────────────────────────────────────────────────

    @property
    def path(self) -> Path:
        return self._path

    @property
    def next_id(self) -> int:
        return self._next_id

    def records(self) -> List[PhotoRecord]:
        """Return the records in store order (a shallow copy of the list)."""
        return list(self._records)

    def record_count(self) -> int:
        return len(self._records)

    def get(self, record_id: int) -> Optional[PhotoRecord]:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def find_by_title(self, title: str) -> Optional[PhotoRecord]:
        """First record whose name matches title case-insensitively."""
        for record in self._records:
            if record.matches_title(title):
                return record
        return None

    def contains(self, name: str, folder: str) -> bool:
        name, folder = name.lower(), folder.lower()
        return any(
            r.name.lower() == name and r.folder.lower() == folder
            for r in self._records
        )

    def _require(self, record_id: int) -> PhotoRecord:
        record = self.get(record_id)
        if record is None:
            raise NotFoundError(f"Photo with id {record_id} not found.")
        return record

    # ── Mutation ──────────────────────────────────────────────────────────────

    def insert(self, name: str, photo_type: str, folder: str) -> PhotoRecord:
        name = check_photo_name(name.strip())
        photo_type = check_photo_type(photo_type.strip())
        folder = check_folder_name(folder.strip())
        if self.contains(name, folder):
            raise DuplicateError(
                f"Photo '{name}' already exists in folder '{folder}'."
            )
        record = PhotoRecord(
            id=self._next_id,
            name=name,
            type=photo_type,
            folder=folder,
            date_time=_now(),
            is_favourite=False,
        )
        self._next_id += 1
        self._records.append(record)
        return record

    def delete_by_id(self, record_id: int) -> Optional[PhotoRecord]:
        """Remove the record with record_id; return it, or None if absent."""
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return self._remove_at(index)
        return None

    def delete_by_name(self, name: str) -> Optional[PhotoRecord]:
        """Remove the first record matching name case-insensitively."""
        for index, record in enumerate(self._records):
            if record.matches_title(name):
                return self._remove_at(index)
        return None

    def _remove_at(self, index: int) -> PhotoRecord:
        removed = self._records.pop(index)
        self.reassign_ids()
        return removed

    def reassign_ids(self) -> None:
        for position, record in enumerate(self._records, start=1):
            record.id = position
        self._next_id = len(self._records) + 1

    def edit_by_title(
        self,
        title: str,
        new_title: Optional[str] = None,
        new_date: Optional[str] = None,
        new_type: Optional[str] = None,
    ) -> PhotoRecord:
        """
        Partially update the first record titled `title`.

        Blank values keep the current field. Every supplied value is
        validated before any of them is applied. Name+folder uniqueness is
        not re-checked on rename.
        """
        title = (title or "").strip()
        if not title:
            raise ValidationError("Title cannot be empty.")
        record = self.find_by_title(title)
        if record is None:
            raise NotFoundError(f"Photo titled '{title}' not found.")

        new_title = (new_title or "").strip()
        new_date = (new_date or "").strip()
        new_type = (new_type or "").strip()
        if new_title:
            check_photo_name(new_title)
        if new_date:
            check_datetime(new_date)
        if new_type:
            new_type = check_photo_type(new_type)

        if new_title:
            record.name = new_title
        if new_date:
            record.date_time = new_date
        if new_type:
            record.type = new_type
        return record

    def change_folder_or_type(
        self,
        record_id: int,
        new_folder: Optional[str] = None,
        new_type: Optional[str] = None,
    ) -> bool:
        """Apply the supplied values that differ from the current ones."""
        record = self._require(record_id)
        new_folder = (new_folder or "").strip()
        new_type = (new_type or "").strip()
        if new_folder:
            check_folder_name(new_folder)
        if new_type:
            new_type = check_photo_type(new_type)

        changed = False
        if new_folder and new_folder.lower() != record.folder.lower():
            record.folder = new_folder
            changed = True
        if new_type and new_type != record.type.lower():
            record.type = new_type
            changed = True
        return changed

    def set_favourite(self, record_id: int, value: bool) -> bool:
        """Set the favourite flag; return True only if it flipped."""
        record = self._require(record_id)
        if record.is_favourite == value:
            return False
        record.is_favourite = value
        return True

    def sort(self, key: str, descending: bool = False) -> None:
        """Stable sort of the store order by id, name or date/time."""
        if key not in _SORT_FIELDS:
            raise ValidationError(
                f"Unknown sort key {key!r}; expected one of {', '.join(SORT_KEYS)}."
            )
        self._records.sort(key=_SORT_FIELDS[key], reverse=descending)

    # ── Persistence ───────────────────────────────────────────────────────────

    def save(self) -> None:
        """Rewrite the catalogue file. In-memory state is kept on failure."""
        try:
            write_catalog(self._path, self._records)
        except OSError as e:
            logger.error("Error saving gallery to {}: {}", self._path, e)
            raise IOFailure(f"Error saving gallery: {e}") from e
        logger.debug("Saved {} records to {}", len(self._records), self._path)

    @staticmethod
    def catalog_path_for(data_dir: Path) -> Path:
        return data_dir / CATALOG_FILENAME
