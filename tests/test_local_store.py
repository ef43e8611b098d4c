"""Tests for the local filesystem store."""

from __future__ import annotations

from pathlib import Path

import pytest

from drive_cleaner.connectors.local import LocalFolderStore
from drive_cleaner.errors import DeleteError, ListError, TransferError
from drive_cleaner.export_policy import DocumentExportPolicy
from drive_cleaner.processor import BatchRunner


def _populate(folder: Path, count: int) -> None:
    folder.mkdir(parents=True, exist_ok=True)
    for index in range(count):
        (folder / f"note-{index}.txt").write_text(f"note {index}", encoding="utf-8")


def test_list_children_pages_through_files(tmp_path: Path) -> None:
    source = tmp_path / "source"
    _populate(source, 3)
    (source / "subdir").mkdir()
    store = LocalFolderStore()

    first = store.list_children(str(source), page_size=2)
    second = store.list_children(str(source), page_size=2, cursor=first.next_cursor)

    assert [item.name for item in first.items] == ["note-0.txt", "note-1.txt"]
    assert first.items[0].content_kind == "text/plain"
    assert [item.name for item in second.items] == ["note-2.txt"]
    assert second.next_cursor is None


def test_list_children_missing_folder_raises(tmp_path: Path) -> None:
    with pytest.raises(ListError):
        LocalFolderStore().list_children(str(tmp_path / "missing"), page_size=10)


def test_export_is_not_supported(tmp_path: Path) -> None:
    with pytest.raises(TransferError):
        LocalFolderStore().export_content(str(tmp_path / "a"), "application/pdf")


def test_runner_moves_files_into_trash(tmp_path: Path) -> None:
    source = tmp_path / "source"
    _populate(source, 3)
    runner = BatchRunner(store=LocalFolderStore(), policy=DocumentExportPolicy(), page_size=2)

    summary = runner.run(str(source), tmp_path / "backup")

    assert summary.deleted == 3
    assert sorted(p.name for p in (tmp_path / "backup").iterdir()) == [
        "note-0.txt",
        "note-1.txt",
        "note-2.txt",
    ]
    assert sorted(p.name for p in (source / ".trash").iterdir()) == [
        "note-0.txt",
        "note-1.txt",
        "note-2.txt",
    ]
    assert [p for p in source.iterdir() if p.is_file()] == []

    rerun = runner.run(str(source), tmp_path / "backup")
    assert rerun.seen == 0


def test_soft_delete_keeps_earlier_trashed_copies(tmp_path: Path) -> None:
    source = tmp_path / "source"
    source.mkdir()
    store = LocalFolderStore()
    for content in ("first", "second", "third"):
        (source / "report.txt").write_text(content, encoding="utf-8")
        store.soft_delete(str(source / "report.txt"))

    trash = source / ".trash"
    assert (trash / "report.txt").read_text(encoding="utf-8") == "first"
    assert (trash / "report (1).txt").read_text(encoding="utf-8") == "second"
    assert (trash / "report (2).txt").read_text(encoding="utf-8") == "third"
    assert not (source / "report.txt").exists()


def test_soft_delete_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(DeleteError):
        LocalFolderStore().soft_delete(str(tmp_path / "gone.txt"))
