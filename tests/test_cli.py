"""End-to-end tests for the command line entrypoint."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from drive_cleaner import cli
from drive_cleaner.errors import AuthError, ListError, exit_code_for


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


def _write_config(tmp_path: Path, data: object) -> Path:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def _local_config(tmp_path: Path) -> dict:
    return {
        "provider": "local",
        "output": {"directory": str(tmp_path / "backup")},
        "local": {"path": str(tmp_path / "inbox")},
        "logging": {"directory": str(tmp_path / "log")},
    }


def test_main_empties_local_folder(tmp_path: Path) -> None:
    inbox = tmp_path / "inbox"
    inbox.mkdir()
    (inbox / "a.txt").write_text("alpha", encoding="utf-8")
    (inbox / "b.csv").write_text("1,2", encoding="utf-8")
    config_path = _write_config(tmp_path, _local_config(tmp_path))

    code = cli.main(["--config", str(config_path)])

    assert code == 0
    assert (tmp_path / "backup" / "a.txt").read_text(encoding="utf-8") == "alpha"
    assert sorted(p.name for p in (inbox / ".trash").iterdir()) == ["a.txt", "b.csv"]
    assert any((tmp_path / "log").glob("*.log"))


def test_main_overrides_folder_and_output(tmp_path: Path) -> None:
    other = tmp_path / "other"
    other.mkdir()
    (other / "c.txt").write_text("gamma", encoding="utf-8")
    (tmp_path / "inbox").mkdir()
    config_path = _write_config(tmp_path, _local_config(tmp_path))

    code = cli.main(
        [
            "--config",
            str(config_path),
            "--folder-id",
            str(other),
            "--output-dir",
            str(tmp_path / "elsewhere"),
            "--page-size",
            "1",
        ]
    )

    assert code == 0
    assert (tmp_path / "elsewhere" / "c.txt").exists()


def test_main_empty_folder_is_success(tmp_path: Path) -> None:
    (tmp_path / "inbox").mkdir()
    config_path = _write_config(tmp_path, _local_config(tmp_path))

    assert cli.main(["--config", str(config_path)]) == 0


def test_main_listing_failure_exit_code(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path, _local_config(tmp_path))

    code = cli.main(["--config", str(config_path)])

    assert code == exit_code_for(ListError()) == 5


def test_main_invalid_config_exit_code(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path, {"provider": "local"})

    code = cli.main(["--config", str(config_path), "--log-dir", str(tmp_path / "log")])

    assert code == 2


@pytest.mark.parametrize(
    "data",
    [
        ["not", "an", "object"],
        {"provider": "local", "output": "backup", "local": {"path": "inbox"}},
        {"provider": "local", "output": {"directory": "backup"}, "local": []},
        {
            "provider": "local",
            "output": {"directory": "backup"},
            "local": {"path": "inbox"},
            "logging": {"keep_days": None},
        },
    ],
)
def test_main_malformed_config_exit_code(tmp_path: Path, data: object) -> None:
    config_path = _write_config(tmp_path, data)

    code = cli.main(["--config", str(config_path), "--log-dir", str(tmp_path / "log")])

    assert code == 2


def test_main_missing_credentials_exit_code(tmp_path: Path) -> None:
    config_path = _write_config(
        tmp_path,
        {
            "output": {"directory": str(tmp_path / "backup")},
            "google_drive": {
                "folder_id": "folder-1",
                "service_account_key_file": str(tmp_path / "absent.json"),
            },
            "logging": {"directory": str(tmp_path / "log")},
        },
    )

    code = cli.main(["--config", str(config_path)])

    assert code == exit_code_for(AuthError()) == 3
    assert not (tmp_path / "backup").exists()
