from pathlib import Path
from typing import Generator, Optional, Tuple

from catalog_store import CATALOG_FILENAME

PHOTO_EXTENSIONS = {
    ".jpg": "jpg",
    ".png": "png",
}


def classify_file(file_path: Path) -> Optional[str]:
    """Return 'jpg', 'png', or None based on file extension."""
    return PHOTO_EXTENSIONS.get(file_path.suffix.lower())


def _is_hidden(path: Path) -> bool:
    """Return True if any component of the path starts with a dot."""
    return any(part.startswith(".") for part in path.parts)


def folder_label(source_path: Path, file_path: Path) -> str:
    """
    Catalogue folder for a scanned file: the source directory name plus
    the relative parent path, joined with forward slashes.
    """
    rel_parent = file_path.parent.relative_to(source_path)
    parts = [source_path.name] + [p for p in rel_parent.parts if p != "."]
    return "/".join(p for p in parts if p)


def scan_directory(source_path: Path) -> Generator[Tuple[Path, str], None, None]:
    """
    Walk source_path recursively, yielding (file_path, photo_type) for
    each jpg or png file. Skips hidden paths, symlinks, zero-byte files
    and the catalogue file. File contents are never read.
    """
    for file_path in sorted(source_path.rglob("*")):
        rel = file_path.relative_to(source_path)

        if _is_hidden(rel):
            continue
        if file_path.is_symlink() or not file_path.is_file():
            continue
        if file_path.name == CATALOG_FILENAME:
            continue

        try:
            if file_path.stat().st_size == 0:
                continue
        except PermissionError:
            continue

        photo_type = classify_file(file_path)
        if photo_type is not None:
            yield file_path, photo_type


def count_photo_files(source_path: Path) -> int:
    """Count photo files in source_path for progress bar sizing."""
    total = 0
    for _ in scan_directory(source_path):
        total += 1
    return total
