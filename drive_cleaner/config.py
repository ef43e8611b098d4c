"""Configuration utilities for Drive Cleaner."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Sequence, Tuple

from .export_policy import ExportTarget

DRIVE_SCOPE = "https://www.googleapis.com/auth/drive"
MAX_PAGE_SIZE = 1000


@dataclass(slots=True)
class GoogleDriveConfig:
    """Settings required to empty a Google Drive folder.

    Exactly one credential source is used: a service account key file, or an
    OAuth client secrets file with a cached user token. When the token cache
    path is omitted it defaults to `<client_secrets_stem>_token.json` next to
    the client secrets file.
    """

    folder_id: str
    service_account_key_file: Optional[Path] = None
    oauth_client_secrets_file: Optional[Path] = None
    oauth_token_file: Optional[Path] = None
    scopes: Tuple[str, ...] = (DRIVE_SCOPE,)

    @property
    def uses_service_account(self) -> bool:
        return self.service_account_key_file is not None

    @property
    def credential_source(self) -> Optional[Path]:
        return self.service_account_key_file or self.oauth_client_secrets_file


@dataclass(slots=True)
class LocalFolderConfig:
    """Settings for the local filesystem store."""

    path: Path
    trash_directory: str = ".trash"


@dataclass(slots=True)
class OutputConfig:
    """Where downloaded files are written."""

    directory: Path


@dataclass(slots=True)
class LoggingConfig:
    """Where daily log files go and how long they are kept."""

    directory: Optional[Path] = None
    keep_days: int = 7


@dataclass(slots=True)
class AppConfig:
    """Top-level application configuration."""

    provider: Literal["google_drive", "local"]
    output: OutputConfig
    page_size: int = 100
    export_mapping: Dict[str, ExportTarget] = field(default_factory=dict)
    google_drive: Optional[GoogleDriveConfig] = None
    local: Optional[LocalFolderConfig] = None
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def target_folder_id(self) -> str:
        if self.provider == "google_drive":
            if not self.google_drive:
                raise ValueError("Google Drive configuration missing")
            return self.google_drive.folder_id
        if not self.local:
            raise ValueError("Local folder configuration missing")
        return str(self.local.path)

    @staticmethod
    def _coerce_path(value: Optional[str | Path]) -> Optional[Path]:
        if value is None:
            return None
        return Path(os.path.expandvars(str(value))).expanduser().resolve()

    @staticmethod
    def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
        value = data.get(key)
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ValueError(f"{key} must be a JSON object")
        return value

    @staticmethod
    def _parse_int(value: Any, name: str) -> int:
        if isinstance(value, bool):
            raise ValueError(f"{name} must be an integer")
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ValueError(f"{name} must be an integer") from None

    @staticmethod
    def parse_page_size(value: Any) -> int:
        try:
            page_size = int(value)
        except (TypeError, ValueError):
            raise ValueError("page_size must be an integer") from None
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}")
        return page_size

    @staticmethod
    def _parse_export_mapping(data: Dict[str, Any]) -> Dict[str, ExportTarget]:
        mapping: Dict[str, ExportTarget] = {}
        for kind, target in data.items():
            if not isinstance(target, dict):
                raise ValueError(
                    f"export_mapping.{kind} must be an object with mime_type and extension"
                )
            mime_type = target.get("mime_type")
            extension = str(target.get("extension", "")).lstrip(".")
            if not mime_type or not extension:
                raise ValueError(
                    f"export_mapping.{kind} requires both mime_type and extension"
                )
            mapping[str(kind)] = ExportTarget(str(mime_type), extension)
        return mapping

    @classmethod
    def _parse_google_drive(cls, gd: Dict[str, Any]) -> GoogleDriveConfig:
        folder_id = gd.get("folder_id")
        if not folder_id:
            raise ValueError("google_drive.folder_id is required")

        key_file = cls._coerce_path(gd.get("service_account_key_file"))
        client_secrets = cls._coerce_path(gd.get("oauth_client_secrets_file"))
        if key_file is None and client_secrets is None:
            raise ValueError(
                "google_drive requires service_account_key_file or oauth_client_secrets_file"
            )
        if key_file is not None and client_secrets is not None:
            raise ValueError(
                "google_drive accepts only one of service_account_key_file "
                "and oauth_client_secrets_file"
            )

        token_file = None
        if client_secrets is not None:
            token_override = gd.get("oauth_token_file")
            if token_override is not None:
                token_file = cls._coerce_path(token_override)
            else:
                token_file = client_secrets.with_name(
                    f"{client_secrets.stem}_token.json"
                )

        scopes: Sequence[str] = gd.get("scopes", [DRIVE_SCOPE])
        if not isinstance(scopes, list) or not all(isinstance(s, str) for s in scopes):
            raise ValueError("google_drive.scopes must be a list of strings")
        return GoogleDriveConfig(
            folder_id=str(folder_id),
            service_account_key_file=key_file,
            oauth_client_secrets_file=client_secrets,
            oauth_token_file=token_file,
            scopes=tuple(str(scope) for scope in scopes),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
        if not isinstance(data, dict):
            raise ValueError("configuration root must be a JSON object")

        provider = str(data.get("provider", "google_drive")).lower()
        if provider not in {"google_drive", "local"}:
            raise ValueError("provider must be either 'google_drive' or 'local'")

        output_dir = cls._coerce_path(cls._section(data, "output").get("directory"))
        if output_dir is None:
            raise ValueError("output.directory must be provided in the configuration")

        google_drive_cfg = None
        if data.get("google_drive") is not None:
            google_drive_cfg = cls._parse_google_drive(cls._section(data, "google_drive"))

        local_cfg = None
        if data.get("local") is not None:
            local_data = cls._section(data, "local")
            local_path = cls._coerce_path(local_data.get("path"))
            if local_path is None:
                raise ValueError("local.path is required for the local provider")
            local_cfg = LocalFolderConfig(
                path=local_path,
                trash_directory=str(local_data.get("trash_directory", ".trash")),
            )

        if provider == "google_drive" and google_drive_cfg is None:
            raise ValueError("google_drive section is required for the google_drive provider")
        if provider == "local" and local_cfg is None:
            raise ValueError("local section is required for the local provider")

        logging_data = cls._section(data, "logging")
        keep_days = cls._parse_int(logging_data.get("keep_days", 7), "logging.keep_days")
        if keep_days < 1:
            raise ValueError("logging.keep_days must be at least 1")
        logging_cfg = LoggingConfig(
            directory=cls._coerce_path(logging_data.get("directory")),
            keep_days=keep_days,
        )

        return cls(
            provider=provider,  # type: ignore[arg-type]
            output=OutputConfig(directory=output_dir),
            page_size=cls.parse_page_size(data.get("page_size", 100)),
            export_mapping=cls._parse_export_mapping(cls._section(data, "export_mapping")),
            google_drive=google_drive_cfg,
            local=local_cfg,
            logging=logging_cfg,
        )


def load_config(path: str | Path) -> AppConfig:
    """Load configuration data from a JSON file."""

    config_path = Path(path).expanduser().resolve()
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)

    return AppConfig.from_dict(data)


__all__ = [
    "AppConfig",
    "DRIVE_SCOPE",
    "GoogleDriveConfig",
    "LocalFolderConfig",
    "LoggingConfig",
    "OutputConfig",
    "load_config",
]
