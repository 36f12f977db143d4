"""
Integration tests — the catalog.py command line end to end, plus bulk
import through Gallery.import_directory. Every test works in a fresh data directory.
"""
from pathlib import Path
from unittest.mock import patch

import pytest
from loguru import logger

from catalog import format_record, main
from catalog_store import CatalogStore
from gallery import Gallery
from tests.conftest import make_file, make_record


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    # main() points loguru at the captured stderr of the finished test.
    logger.remove()


def _run(data_dir: Path, *argv: str) -> int:
    return main(["--data-dir", str(data_dir), "--no-progress", *argv])


def _catalog_lines(data_dir: Path) -> list:
    return (data_dir / "Photos.txt").read_text(encoding="utf-8").splitlines()


# ── Photo commands ────────────────────────────────────────────────────────────

class TestCommands:
    def test_add_and_list(self, data_dir, capsys):
        assert _run(data_dir, "add", "Sunset", "JPG", "2024/holiday") == 0
        assert _run(data_dir, "list") == 0
        out = capsys.readouterr().out
        assert " Name     : Sunset" in out
        assert "Total visible photos: 1" in out
        assert _catalog_lines(data_dir)[0].startswith("1;Sunset;jpg;2024/holiday;")

    def test_duplicate_add_fails(self, data_dir, capsys):
        _run(data_dir, "add", "Sunset", "jpg", "2024")
        assert _run(data_dir, "add", "sunset", "jpg", "2024") == 1
        assert "already exists" in capsys.readouterr().err
        assert len(_catalog_lines(data_dir)) == 1

    def test_delete_by_id_reassigns(self, data_dir):
        for name in ("a", "b", "c"):
            _run(data_dir, "add", name, "jpg", "2024")
        assert _run(data_dir, "delete", "--id", "2") == 0
        assert [line.split(";")[:2] for line in _catalog_lines(data_dir)] == [
            ["1", "a"], ["2", "c"],
        ]

    def test_delete_by_name(self, data_dir):
        _run(data_dir, "add", "a", "jpg", "2024")
        assert _run(data_dir, "delete", "--name", "A") == 0
        assert _catalog_lines(data_dir) == []

    def test_delete_requires_target(self, data_dir):
        with pytest.raises(SystemExit) as exc:
            _run(data_dir, "delete")
        assert exc.value.code == 2

    def test_favourite_and_favourites(self, data_dir, capsys):
        _run(data_dir, "add", "a", "jpg", "2024")
        _run(data_dir, "add", "b", "jpg", "2024")
        assert _run(data_dir, "favourite", "2") == 0
        capsys.readouterr()
        _run(data_dir, "favourites")
        out = capsys.readouterr().out
        assert " Name     : b" in out
        assert " Name     : a" not in out
        assert _run(data_dir, "favourite", "2", "--off") == 0
        assert _catalog_lines(data_dir)[1].endswith(";false")
        assert _run(data_dir, "favourite", "2", "--on") == 0
        assert _catalog_lines(data_dir)[1].endswith(";true")

    def test_favourite_on_and_off_exclusive(self, data_dir):
        _run(data_dir, "add", "a", "jpg", "2024")
        with pytest.raises(SystemExit) as exc:
            _run(data_dir, "favourite", "1", "--on", "--off")
        assert exc.value.code == 2

    def test_edit_and_move(self, data_dir):
        _run(data_dir, "add", "a", "jpg", "2024")
        assert _run(data_dir, "edit", "a", "--title", "b", "--date", "2020-01-01 10:00:00") == 0
        assert _run(data_dir, "move", "1", "--folder", "archive", "--type", "png") == 0
        assert _catalog_lines(data_dir) == ["1;b;png;archive;2020-01-01 10:00:00;false"]

    def test_edit_invalid_type_fails(self, data_dir):
        _run(data_dir, "add", "a", "jpg", "2024")
        assert _run(data_dir, "edit", "a", "--type", "gif") == 1

    def test_search_and_sort(self, data_dir, capsys):
        for name in ("charlie", "alpha", "bravo"):
            _run(data_dir, "add", name, "jpg", "2024")
        assert _run(data_dir, "sort", "name") == 0
        assert [line.split(";")[1] for line in _catalog_lines(data_dir)] == [
            "alpha", "bravo", "charlie",
        ]
        assert _run(data_dir, "sort", "id", "--desc") == 0
        assert [line.split(";")[0] for line in _catalog_lines(data_dir)] == ["3", "2", "1"]
        capsys.readouterr()
        assert _run(data_dir, "search", "ALP") == 0
        assert " Name     : alpha" in capsys.readouterr().out

    def test_hide_unhide_hidden(self, data_dir, capsys, monkeypatch):
        _run(data_dir, "add", "a", "jpg", "2024")
        _run(data_dir, "add", "b", "jpg", "2024")
        assert _run(data_dir, "hide", "a") == 0
        capsys.readouterr()
        _run(data_dir, "list")
        assert " Name     : a" not in capsys.readouterr().out

        monkeypatch.setenv("GALLERY_PASSWORD", "s3cret")
        with patch("catalog.getpass.getpass", return_value="s3cret"):
            assert _run(data_dir, "hidden") == 0
        out = capsys.readouterr().out
        assert "(HIDDEN)" in out and " Name     : a" in out

        with patch("catalog.getpass.getpass", return_value="nope"):
            assert _run(data_dir, "hidden") == 1

        assert _run(data_dir, "unhide", "A") == 0
        assert (data_dir / "hidden_images.txt").read_text(encoding="utf-8") == ""

    def test_hidden_without_password_configured(self, data_dir, monkeypatch):
        monkeypatch.delenv("GALLERY_PASSWORD", raising=False)
        assert _run(data_dir, "hidden") == 1

    def test_collage(self, data_dir):
        _run(data_dir, "add", "Sunset", "jpg", "2024")
        _run(data_dir, "add", "Beach", "png", "2024")
        assert _run(data_dir, "collage", "Summer", "Sunset", "Beach") == 0
        assert (data_dir / "collage.txt").read_text(encoding="utf-8") == (
            "Collage: Summer → Sunset, Beach\n"
        )
        assert _run(data_dir, "collage", "Winter", "Snow") == 1

    def test_data_dir_created(self, tmp_path):
        target = tmp_path / "new" / "gallery"
        assert _run(target, "list") == 0
        assert (target / "hidden_images.txt").exists()


# ── Bulk import ───────────────────────────────────────────────────────────────

class TestImport:
    def test_import_registers_photos(self, tmp_path, data_dir):
        src = tmp_path / "Pictures"
        make_file(src / "Sunset.jpg")
        make_file(src / "2024" / "Beach.PNG")
        make_file(src / "notes.txt")
        gallery = Gallery.open(data_dir)

        summary = gallery.import_directory(src, use_progress=False).summary

        assert summary.files_scanned == 2
        assert summary.files_added == 2
        stored = CatalogStore(gallery.store.path)
        assert {(r.name, r.type, r.folder) for r in stored.records()} == {
            ("Sunset", "jpg", "Pictures"),
            ("Beach", "png", "Pictures/2024"),
        }

    def test_second_import_skips_all(self, tmp_path, data_dir):
        src = tmp_path / "Pictures"
        make_file(src / "a.jpg")
        make_file(src / "b.jpg")
        gallery = Gallery.open(data_dir)
        gallery.import_directory(src, use_progress=False)
        summary = gallery.import_directory(src, use_progress=False).summary
        assert summary.files_added == 0
        assert summary.files_skipped == 2
        assert gallery.store.record_count() == 2

    def test_invalid_names_reported(self, tmp_path, data_dir):
        src = tmp_path / "Pictures"
        make_file(src / "good.jpg")
        make_file(src / "bad.name.jpg")
        gallery = Gallery.open(data_dir)
        summary = gallery.import_directory(src, use_progress=False).summary
        assert summary.files_added == 1
        assert summary.files_errored == 1
        assert summary.errors[0][0].endswith("bad.name.jpg")

    def test_import_command(self, tmp_path, data_dir, capsys):
        src = tmp_path / "Pictures"
        make_file(src / "a.jpg")
        assert _run(data_dir, "import", str(src)) == 0
        assert "Added   :      1 files" in capsys.readouterr().out
        assert len(_catalog_lines(data_dir)) == 1

    def test_import_missing_dir(self, tmp_path, data_dir):
        assert _run(data_dir, "import", str(tmp_path / "nope")) == 1


# ── Output ────────────────────────────────────────────────────────────────────

class TestFormatRecord:
    def test_block_layout(self):
        text = format_record(make_record(3, "Sunset", is_favourite=True))
        lines = text.splitlines()
        assert lines[0] == "-" * 50
        assert lines[1] == " ID       : 3"
        assert lines[6] == " Favourite: Yes"
        assert lines[-1] == "-" * 50
