"""Local filesystem store useful for development and rehearsal runs."""

from __future__ import annotations

import mimetypes
import shutil
from pathlib import Path
from typing import Iterator, List, Optional

from ..errors import DeleteError, ListError, TransferError
from .base import ListPage, RemoteItem, RemoteStore

_CHUNK_SIZE = 1024 * 1024


class LocalFolderStore(RemoteStore):
    """Treat folders on the local filesystem as the remote store.

    Item identifiers are absolute file paths and folder identifiers are
    directory paths. Trashed files are moved into ``trash_directory`` inside
    their folder, which is never listed.
    """

    def __init__(self, trash_directory: str = ".trash"):
        self._trash_directory = trash_directory

    def list_children(
        self, folder_id: str, *, page_size: int, cursor: Optional[str] = None
    ) -> ListPage:
        folder = Path(folder_id).expanduser().resolve()
        if not folder.is_dir():
            raise ListError("Local folder does not exist", folder_id=folder_id)

        # The trash directory is a subdirectory, so it never shows up here.
        files: List[Path] = [path for path in sorted(folder.iterdir()) if path.is_file()]
        offset = int(cursor) if cursor else 0
        page = files[offset : offset + page_size]
        next_offset = offset + len(page)
        items = tuple(
            RemoteItem(
                identifier=str(path),
                name=path.name,
                content_kind=mimetypes.guess_type(path.name)[0]
                or "application/octet-stream",
            )
            for path in page
        )
        next_cursor = str(next_offset) if next_offset < len(files) else None
        return ListPage(items=items, next_cursor=next_cursor)

    def export_content(self, item_id: str, target_kind: str) -> Iterator[bytes]:
        raise TransferError(
            f"Local files cannot be exported to {target_kind}", item_id=item_id
        )

    def download_content(self, item_id: str) -> Iterator[bytes]:
        path = Path(item_id)
        if not path.is_file():
            raise TransferError("Local file not found", item_id=item_id)
        return self._read_chunks(path)

    def soft_delete(self, item_id: str) -> None:
        path = Path(item_id)
        trash = path.parent / self._trash_directory
        try:
            trash.mkdir(parents=True, exist_ok=True)
            shutil.move(str(path), str(self._free_trash_path(trash, path.name)))
        except OSError as exc:
            raise DeleteError("Moving file to trash failed", item_id=item_id) from exc

    @staticmethod
    def _free_trash_path(trash: Path, name: str) -> Path:
        """Return ``trash/name``, or ``name (N)`` when earlier deletions took it."""

        candidate = trash / name
        counter = 0
        while candidate.exists():
            counter += 1
            candidate = trash / f"{Path(name).stem} ({counter}){Path(name).suffix}"
        return candidate

    @staticmethod
    def _read_chunks(path: Path) -> Iterator[bytes]:
        with path.open("rb") as handle:
            while True:
                chunk = handle.read(_CHUNK_SIZE)
                if not chunk:
                    break
                yield chunk


__all__ = ["LocalFolderStore"]
