"""
Line-oriented text codec for the photo catalogue.

Each record is one line: id;name;type;folder;date_time;is_favourite
Loading is best-effort: corrupt lines are logged and skipped, never fatal.
"""
import os
import re
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from loguru import logger

from errors import PersistenceWarning
from models import PhotoRecord

FIELD_SEPARATOR = ";"
FIELD_COUNT = 6
ID_PATTERN = re.compile(r"[+-]?[0-9]+")


def encode_record(record: PhotoRecord) -> str:
    return FIELD_SEPARATOR.join([
        str(record.id),
        record.name,
        record.type,
        record.folder,
        record.date_time,
        "true" if record.is_favourite else "false",
    ])


def decode_line(line: str) -> Optional[PhotoRecord]:
    """Parse one catalogue line; return None (and log) if it is corrupt."""
    parts = line.split(FIELD_SEPARATOR)
    if len(parts) != FIELD_COUNT:
        logger.warning(
            "{}: skipping malformed catalogue entry ({} fields): {!r}",
            PersistenceWarning.__name__, len(parts), line,
        )
        return None
    if ID_PATTERN.fullmatch(parts[0]) is None:
        logger.warning(
            "{}: skipping catalogue entry with invalid id: {!r}",
            PersistenceWarning.__name__, line,
        )
        return None
    return PhotoRecord(
        id=int(parts[0]),
        name=parts[1],
        type=parts[2],
        folder=parts[3],
        date_time=parts[4],
        is_favourite=parts[5].strip().lower() == "true",
    )


def serialize(records: Iterable[PhotoRecord]) -> str:
    return "".join(encode_record(r) + "\n" for r in records)


def deserialize(text: str) -> List[PhotoRecord]:
    return _decode_lines(text.splitlines())


def _decode_lines(lines: Iterable[str]) -> List[PhotoRecord]:
    records: List[PhotoRecord] = []
    for line in lines:
        if not line.strip():
            continue
        record = decode_line(line)
        if record is not None:
            records.append(record)
    return records


# ── File helpers ──────────────────────────────────────────────────────────────

def iter_text_lines(raw: bytes, source: str) -> Iterator[str]:
    """
    Decode raw file content line by line as UTF-8. A line holding invalid
    bytes is logged and skipped; the rest of the file still loads.
    """
    for number, raw_line in enumerate(raw.splitlines(), start=1):
        try:
            yield raw_line.decode("utf-8")
        except UnicodeDecodeError as e:
            logger.warning(
                "{}: skipping undecodable line {} in {}: {}",
                PersistenceWarning.__name__, number, source, e.reason,
            )


def read_catalog(path: Path) -> List[PhotoRecord]:
    """Load records from path; a missing file is an empty catalogue."""
    if not path.exists():
        logger.info("{} not found, starting with an empty gallery", path.name)
        return []
    with open(path, "rb") as f:
        raw = f.read()
    return _decode_lines(iter_text_lines(raw, path.name))


def write_catalog(path: Path, records: Iterable[PhotoRecord]) -> None:
    """Rewrite the whole catalogue file via a temporary file."""
    text = serialize(records)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(tmp_path, "w", encoding="utf-8", newline="\n") as f:
        f.write(text)
    os.replace(tmp_path, path)
