"""
Shared fixtures for the photo-gallery test suite.
"""
from pathlib import Path
from typing import List

import pytest
from loguru import logger

from catalog_store import CatalogStore
from gallery import Gallery
from models import PhotoRecord


# ── File-creation helpers ─────────────────────────────────────────────────────

def make_file(path: Path, content: bytes = b"dummy content") -> Path:
    """Create a file with the given content; create parent dirs as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


def make_record(record_id: int = 1, name: str = "Sunset", **overrides) -> PhotoRecord:
    fields = dict(
        id=record_id,
        name=name,
        type="jpg",
        folder="2024",
        date_time="2024-03-15 12:00:00",
        is_favourite=False,
    )
    fields.update(overrides)
    return PhotoRecord(**fields)


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Empty gallery data directory."""
    d = tmp_path / "gallery"
    d.mkdir()
    return d


@pytest.fixture
def store(data_dir: Path) -> CatalogStore:
    return CatalogStore(CatalogStore.catalog_path_for(data_dir))


@pytest.fixture
def gallery(data_dir: Path) -> Gallery:
    return Gallery.open(data_dir)


@pytest.fixture
def sample_record() -> PhotoRecord:
    return make_record(
        7, "Beach Day", type="png", folder="2024/summer",
        date_time="2024-07-01 09:30:00", is_favourite=True,
    )


@pytest.fixture
def warnings_log() -> List[str]:
    """Collect loguru WARNING-and-above messages emitted during a test."""
    messages: List[str] = []
    handler_id = logger.add(
        lambda msg: messages.append(msg.record["message"]),
        level="WARNING",
    )
    yield messages
    logger.remove(handler_id)
