"""
Query and mutation operations over one photo catalogue.

A Gallery owns the record store, the hidden-title set and the collage log
for a data directory. Every public operation returns an Outcome; catalogue
errors are reported through it rather than raised.
"""
import functools
import hmac
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from loguru import logger
from tqdm import tqdm

from catalog_store import CatalogStore
from collage_log import CollageLog
from errors import DuplicateError, GalleryError, IOFailure, NotFoundError, ValidationError
from hidden_store import HiddenSet
from models import ImportSummary, Outcome, PhotoRecord
from scanner import count_photo_files, folder_label, scan_directory

SAVE_EVERY = 50


def _as_outcome(op: Callable[..., Outcome]) -> Callable[..., Outcome]:
    """Turn a GalleryError raised by op into a failed Outcome."""
    @functools.wraps(op)
    def wrapper(*args, **kwargs) -> Outcome:
        try:
            return op(*args, **kwargs)
        except GalleryError as e:
            logger.debug("{} failed: {}", op.__name__, e)
            return Outcome.failure(e)
    return wrapper


class Gallery:
    def __init__(self, store: CatalogStore, hidden: HiddenSet, collages: CollageLog) -> None:
        self.store = store
        self.hidden = hidden
        self.collages = collages

    @classmethod
    def open(cls, data_dir: Path) -> "Gallery":
        """Load (or lazily create) the gallery artifacts under data_dir."""
        return cls(
            store=CatalogStore(CatalogStore.catalog_path_for(data_dir)),
            hidden=HiddenSet(HiddenSet.hidden_path_for(data_dir)),
            collages=CollageLog(CollageLog.collage_path_for(data_dir)),
        )

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _commit(self, message: str, records: Sequence[PhotoRecord]) -> Outcome:
        """Persist the store after a mutation and report the result."""
        try:
            self.store.save()
        except IOFailure as e:
            # The in-memory change stays; the next successful save catches up.
            return Outcome.failure(e, list(records))
        logger.info(message)
        return Outcome.success(message, list(records), changed=True)

    def _resolve_title(self, title: str) -> PhotoRecord:
        title = (title or "").strip()
        if not title:
            raise ValidationError("Title cannot be empty.")
        record = self.store.find_by_title(title)
        if record is None:
            raise NotFoundError(f"Photo titled '{title}' not found.")
        return record

    def _after_delete(self, removed: Optional[PhotoRecord], missing: str) -> Outcome:
        if removed is None:
            return Outcome.failure(NotFoundError(missing))
        sweep_error = None
        try:
            self.hidden.sweep(removed.name)
        except IOFailure as e:
            sweep_error = e
        outcome = self._commit(
            f"Photo '{removed.name}' deleted and IDs reassigned.", [removed]
        )
        if outcome.ok and sweep_error is not None:
            return Outcome.failure(sweep_error, [removed])
        return outcome

    # ── Mutations ─────────────────────────────────────────────────────────────

    @_as_outcome
    def add_photo(self, name: str, photo_type: str, folder: str) -> Outcome:
        record = self.store.insert(name, photo_type, folder)
        return self._commit(f"Photo '{record.name}' added with id {record.id}.", [record])

    @_as_outcome
    def delete_by_id(self, record_id: int) -> Outcome:
        removed = self.store.delete_by_id(record_id)
        return self._after_delete(removed, f"Photo with id {record_id} not found.")

    @_as_outcome
    def delete_by_name(self, name: str) -> Outcome:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Name cannot be empty.")
        removed = self.store.delete_by_name(name)
        return self._after_delete(removed, f"Photo titled '{name}' not found.")

    @_as_outcome
    def edit_photo(
        self,
        title: str,
        new_title: Optional[str] = None,
        new_date: Optional[str] = None,
        new_type: Optional[str] = None,
    ) -> Outcome:
        record = self.store.edit_by_title(title, new_title, new_date, new_type)
        return self._commit("Photo details updated successfully.", [record])

    @_as_outcome
    def change_folder_or_type(
        self,
        record_id: int,
        new_folder: Optional[str] = None,
        new_type: Optional[str] = None,
    ) -> Outcome:
        if not self.store.change_folder_or_type(record_id, new_folder, new_type):
            return Outcome.success("No changes were made.", [self.store.get(record_id)])
        return self._commit("Photo updated successfully.", [self.store.get(record_id)])

    @_as_outcome
    def set_favourite(self, record_id: int, value: bool = True) -> Outcome:
        if not self.store.set_favourite(record_id, value):
            state = "marked as favourite" if value else "not a favourite"
            return Outcome.success(
                f"Photo is already {state}.", [self.store.get(record_id)]
            )
        message = "Photo marked as favourite." if value else "Photo unmarked as favourite."
        return self._commit(message, [self.store.get(record_id)])

    @_as_outcome
    def sort(self, key: str, descending: bool = False) -> Outcome:
        self.store.sort(key, descending=descending)
        return self._commit(f"Photos sorted by {key}.", self.store.records())

    @_as_outcome
    def hide(self, title: str) -> Outcome:
        record = self._resolve_title(title)
        self.hidden.hide(title.strip())
        message = f"Photo '{title.strip()}' marked as hidden."
        logger.info(message)
        return Outcome.success(message, [record], changed=True)

    @_as_outcome
    def unhide(self, title: str) -> Outcome:
        title = (title or "").strip()
        if not title:
            raise ValidationError("Title cannot be empty.")
        self.hidden.unhide(title)
        message = f"Photo '{title}' is visible again."
        logger.info(message)
        return Outcome.success(message, changed=True)

    @_as_outcome
    def create_collage(self, title: str, photo_titles: Sequence[str]) -> Outcome:
        if self.store.record_count() == 0:
            raise NotFoundError("No photos available to create collage.")
        resolved: List[PhotoRecord] = []
        names: List[str] = []
        for photo_title in photo_titles:
            resolved.append(self._resolve_title(photo_title))
            names.append(photo_title.strip())
        line = self.collages.append(title, names)
        return Outcome.success(line, resolved, changed=True)

    def import_directory(self, source_path: Path, use_progress: bool = True) -> Outcome:
        """
        Register every jpg/png under source_path. Only file names are used:
        the stem becomes the photo name and the relative directory the folder.
        Duplicates are skipped, invalid names are counted as errors, and the
        catalogue is saved every SAVE_EVERY additions and once at the end.
        """
        if not source_path.is_dir():
            return Outcome.failure(ValidationError(f"Not a directory: {source_path}"))

        summary = ImportSummary(source_path=str(source_path))
        added: List[PhotoRecord] = []
        total = count_photo_files(source_path)
        added_since_save = 0

        try:
            with tqdm(
                total=total,
                unit="file",
                desc=source_path.name,
                ncols=80,
                disable=not use_progress,
            ) as bar:
                for file_path, photo_type in scan_directory(source_path):
                    summary.files_scanned += 1
                    bar.update(1)
                    bar.set_postfix(added=summary.files_added, skipped=summary.files_skipped)

                    try:
                        record = self.store.insert(
                            file_path.stem, photo_type, folder_label(source_path, file_path)
                        )
                    except DuplicateError:
                        summary.files_skipped += 1
                        logger.debug("SKIP  {}", file_path)
                        continue
                    except ValidationError as e:
                        summary.files_errored += 1
                        summary.errors.append((str(file_path), str(e)))
                        logger.warning("Cannot import {}: {}", file_path, e)
                        continue

                    summary.files_added += 1
                    added.append(record)
                    added_since_save += 1
                    logger.debug("ADD   {} as #{}", file_path, record.id)
                    if added_since_save >= SAVE_EVERY:
                        self.store.save()
                        added_since_save = 0

            if added_since_save:
                self.store.save()
        except IOFailure as e:
            outcome = Outcome.failure(e, added)
            outcome.summary = summary
            return outcome

        message = (
            f"Imported {summary.files_added} of {summary.files_scanned} files "
            f"from {source_path}."
        )
        logger.info(message)
        outcome = Outcome.success(message, added, changed=summary.files_added > 0)
        outcome.summary = summary
        return outcome

    # ── Queries ───────────────────────────────────────────────────────────────

    def list_visible(self) -> Outcome:
        visible = [r for r in self.store.records() if not self.hidden.is_hidden(r.name)]
        return Outcome.success(f"Total visible photos: {len(visible)}", visible)

    def list_hidden(self) -> Outcome:
        hidden = [r for r in self.store.records() if self.hidden.is_hidden(r.name)]
        return Outcome.success(f"Found {len(hidden)} hidden photos.", hidden)

    def view_hidden(self, supplied_secret: str, reference_secret: str) -> Outcome:
        """list_hidden behind a password check against the acting user's secret."""
        if not hmac.compare_digest(
            (supplied_secret or "").encode("utf-8"),
            (reference_secret or "").encode("utf-8"),
        ):
            logger.warning("Hidden photos requested with an incorrect password")
            return Outcome.failure(ValidationError("Incorrect password. Access denied."))
        return self.list_hidden()

    def list_favourites(self) -> Outcome:
        favourites = [
            r for r in self.store.records()
            if r.is_favourite and not self.hidden.is_hidden(r.name)
        ]
        return Outcome.success(f"Found {len(favourites)} favourite photos.", favourites)

    @_as_outcome
    def search(self, query: str) -> Outcome:
        query = (query or "").strip().lower()
        if not query:
            raise ValidationError("Search query cannot be empty.")
        matches = [
            r for r in self.store.records()
            if (query in r.name.lower() or query in r.folder.lower())
            and not self.hidden.is_hidden(r.name)
        ]
        if not matches:
            return Outcome.success("No matching visible photo found.")
        return Outcome.success(f"Found {len(matches)} matching photos.", matches)
