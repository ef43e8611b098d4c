"""Store interfaces for listing, transferring and trashing remote files."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional, Protocol


@dataclass(frozen=True, slots=True)
class RemoteItem:
    """Metadata describing a file stored in a remote folder."""

    identifier: str
    name: str
    content_kind: str


@dataclass(frozen=True, slots=True)
class ListPage:
    """One page of a folder listing."""

    items: tuple[RemoteItem, ...] = field(default_factory=tuple)
    next_cursor: Optional[str] = None


class RemoteStore(Protocol):
    """Capabilities the cleanup workflow needs from a storage provider."""

    def list_children(
        self, folder_id: str, *, page_size: int, cursor: Optional[str] = None
    ) -> ListPage:
        """Return one page of non-trashed items whose parent is ``folder_id``."""

    def export_content(self, item_id: str, target_kind: str) -> Iterator[bytes]:
        """Stream the item converted to ``target_kind``."""

    def download_content(self, item_id: str) -> Iterator[bytes]:
        """Stream the item's raw bytes."""

    def soft_delete(self, item_id: str) -> None:
        """Move the item to a recoverable trash state."""


__all__ = ["ListPage", "RemoteItem", "RemoteStore"]
