"""Tests for the local file sink and the export table."""

from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from drive_cleaner.errors import OutputDirectoryError
from drive_cleaner.export_policy import (
    DEFAULT_EXPORT_MAPPING,
    DocumentExportPolicy,
    ExportTarget,
)
from drive_cleaner.sink import LocalFileSink


def test_sink_creates_nested_directory(tmp_path: Path) -> None:
    sink = LocalFileSink(tmp_path / "a" / "b")

    assert sink.directory.is_dir()


def test_sink_writes_chunks_verbatim(tmp_path: Path) -> None:
    sink = LocalFileSink(tmp_path)

    path = sink.write("Ünïcode name (1).pdf", iter([b"abc", b"", b"def"]))

    assert path.name == "Ünïcode name (1).pdf"
    assert path.read_bytes() == b"abcdef"
    assert [p.name for p in tmp_path.iterdir()] == ["Ünïcode name (1).pdf"]


@pytest.mark.parametrize("name", ["../escape.txt", "sub/file.txt", ""])
def test_sink_rejects_names_outside_directory(tmp_path: Path, name: str) -> None:
    sink = LocalFileSink(tmp_path / "out")

    with pytest.raises(ValueError):
        sink.write(name, iter([b"x"]))

    assert not (tmp_path / "escape.txt").exists()


def test_sink_refuses_to_overwrite(tmp_path: Path) -> None:
    sink = LocalFileSink(tmp_path)
    sink.write("same.txt", iter([b"first"]))

    with pytest.raises(FileExistsError):
        sink.write("same.txt", iter([b"second"]))

    assert (tmp_path / "same.txt").read_bytes() == b"first"


def test_sink_removes_partial_file_on_stream_error(tmp_path: Path) -> None:
    def _chunks():
        yield b"partial"
        raise ConnectionError("dropped")

    sink = LocalFileSink(tmp_path)

    with pytest.raises(ConnectionError):
        sink.write("big.bin", _chunks())

    assert list(tmp_path.iterdir()) == []


@pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
@pytest.mark.parametrize("umask, expected", [(0o022, 0o644), (0o077, 0o600)])
def test_sink_files_follow_process_umask(tmp_path: Path, umask: int, expected: int) -> None:
    previous = os.umask(umask)
    try:
        sink = LocalFileSink(tmp_path)
    finally:
        os.umask(previous)

    path = sink.write("report.pdf", iter([b"%PDF"]))

    assert stat.S_IMODE(path.stat().st_mode) == expected


def test_sink_directory_failure_is_typed(tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")

    with pytest.raises(OutputDirectoryError) as excinfo:
        LocalFileSink(blocker / "out")

    assert "out" in str(excinfo.value)


def test_default_table_covers_workspace_kinds() -> None:
    policy = DocumentExportPolicy()

    assert policy.lookup("application/vnd.google-apps.document") == ExportTarget(
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document", "docx"
    )
    assert policy.lookup("application/vnd.google-apps.drawing") == ExportTarget(
        "application/pdf", "pdf"
    )
    assert policy.lookup("application/vnd.google-apps.script").extension == "json"
    assert set(policy.mapping) == set(DEFAULT_EXPORT_MAPPING)


def test_unknown_kinds_are_not_mapped() -> None:
    policy = DocumentExportPolicy()

    assert policy.lookup("application/pdf") is None
    assert policy.lookup("application/vnd.google-apps.form") is None
    assert policy.is_workspace_kind("application/vnd.google-apps.form")
    assert not policy.is_workspace_kind("application/pdf")


def test_overrides_extend_and_replace_defaults() -> None:
    policy = DocumentExportPolicy.with_overrides(
        {
            "application/vnd.google-apps.spreadsheet": ExportTarget("text/csv", "csv"),
            "application/vnd.google-apps.jam": ExportTarget("application/pdf", "pdf"),
        }
    )

    assert policy.lookup("application/vnd.google-apps.spreadsheet").extension == "csv"
    assert policy.lookup("application/vnd.google-apps.jam").mime_type == "application/pdf"
    assert policy.lookup("application/vnd.google-apps.document").extension == "docx"
    assert DEFAULT_EXPORT_MAPPING["application/vnd.google-apps.spreadsheet"].extension == "xlsx"
