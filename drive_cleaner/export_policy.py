"""Conversion table for Google Workspace documents."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

WORKSPACE_KIND_PREFIX = "application/vnd.google-apps."


@dataclass(frozen=True, slots=True)
class ExportTarget:
    """Format a native document is exported to, and the file extension to use."""

    mime_type: str
    extension: str


DEFAULT_EXPORT_MAPPING: Mapping[str, ExportTarget] = MappingProxyType(
    {
        "application/vnd.google-apps.document": ExportTarget(
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            "docx",
        ),
        "application/vnd.google-apps.spreadsheet": ExportTarget(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            "xlsx",
        ),
        "application/vnd.google-apps.presentation": ExportTarget(
            "application/vnd.openxmlformats-officedocument.presentationml.presentation",
            "pptx",
        ),
        "application/vnd.google-apps.drawing": ExportTarget("application/pdf", "pdf"),
        "application/vnd.google-apps.script": ExportTarget(
            "application/vnd.google-apps.script+json", "json"
        ),
    }
)


class DocumentExportPolicy:
    """Map provider-native document kinds to an export format.

    Kinds missing from the table are treated as ordinary binary files and
    downloaded as-is.
    """

    def __init__(self, mapping: Optional[Mapping[str, ExportTarget]] = None):
        table = DEFAULT_EXPORT_MAPPING if mapping is None else mapping
        self._mapping: Mapping[str, ExportTarget] = MappingProxyType(dict(table))

    @classmethod
    def with_overrides(
        cls, overrides: Optional[Mapping[str, ExportTarget]] = None
    ) -> "DocumentExportPolicy":
        merged = dict(DEFAULT_EXPORT_MAPPING)
        merged.update(overrides or {})
        return cls(merged)

    @property
    def mapping(self) -> Mapping[str, ExportTarget]:
        return self._mapping

    def lookup(self, content_kind: str) -> Optional[ExportTarget]:
        return self._mapping.get(content_kind)

    @staticmethod
    def is_workspace_kind(content_kind: str) -> bool:
        return content_kind.startswith(WORKSPACE_KIND_PREFIX)


__all__ = [
    "DEFAULT_EXPORT_MAPPING",
    "DocumentExportPolicy",
    "ExportTarget",
    "WORKSPACE_KIND_PREFIX",
]
