from pathlib import Path
from typing import List

from loguru import logger

from catalog_codec import iter_text_lines
from errors import DuplicateError, IOFailure, NotFoundError

HIDDEN_FILENAME = "hidden_images.txt"


class HiddenSet:
    """
    Lowercase photo titles excluded from the default listings.

    Entries refer to photos by title only. Hiding appends a line to the
    file; removals rewrite it in full.
    """

    def __init__(self, hidden_path: Path) -> None:
        self._path = hidden_path
        self._titles: List[str] = []
        self.load()

    def load(self) -> List[str]:
        if not self._path.exists():
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                self._path.touch()
            except OSError as e:
                raise IOFailure(f"Error creating {self._path.name}: {e}") from e
            logger.info("Created new {} file", self._path.name)
            self._titles = []
            return self.titles()

        try:
            with open(self._path, "rb") as f:
                raw = f.read()
        except OSError as e:
            raise IOFailure(f"Error reading {self._path.name}: {e}") from e

        titles: List[str] = []
        for line in iter_text_lines(raw, self._path.name):
            title = line.strip().lower()
            if title and title not in titles:
                titles.append(title)
        self._titles = titles
        return self.titles()

    @property
    def path(self) -> Path:
        return self._path

    def titles(self) -> List[str]:
        return list(self._titles)

    def is_hidden(self, title: str) -> bool:
        return title.strip().lower() in self._titles

    def __contains__(self, title: str) -> bool:
        return self.is_hidden(title)

    def __len__(self) -> int:
        return len(self._titles)

    def hide(self, title: str) -> None:
        key = title.strip().lower()
        if key in self._titles:
            raise DuplicateError(f"Photo '{title}' is already hidden.")
        self._titles.append(key)
        try:
            with open(self._path, "a", encoding="utf-8", newline="\n") as f:
                f.write(key + "\n")
        except OSError as e:
            logger.error("Error writing to {}: {}", self._path.name, e)
            raise IOFailure(f"Error writing to {self._path.name}: {e}") from e

    def unhide(self, title: str) -> None:
        if not self.sweep(title):
            raise NotFoundError(f"Photo '{title}' is not hidden.")

    def sweep(self, title: str) -> bool:
        """Drop title if present and rewrite the file; return whether it was."""
        key = title.strip().lower()
        if key not in self._titles:
            return False
        self._titles.remove(key)
        self._rewrite()
        return True

    def _rewrite(self) -> None:
        try:
            with open(self._path, "w", encoding="utf-8", newline="\n") as f:
                f.writelines(t + "\n" for t in self._titles)
        except OSError as e:
            logger.error("Error updating {}: {}", self._path.name, e)
            raise IOFailure(f"Error updating {self._path.name}: {e}") from e

    @staticmethod
    def hidden_path_for(data_dir: Path) -> Path:
        return data_dir / HIDDEN_FILENAME
