"""Google Drive store."""

from __future__ import annotations

import io
from typing import Any, Iterator, Optional

from ..errors import DeleteError, ListError, TransferError
from .base import ListPage, RemoteItem, RemoteStore

DEFAULT_CHUNK_SIZE = 8 * 1024 * 1024


def _quote(value: str) -> str:
    """Escape a value for use inside a single-quoted Drive query string."""

    return value.replace("\\", "\\\\").replace("'", "\\'")


class GoogleDriveStore(RemoteStore):
    """List, download, export and trash files through the Drive v3 API."""

    def __init__(self, service: "Resource", *, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self._service = service
        self._chunk_size = max(256 * 1024, int(chunk_size))

    def list_children(
        self, folder_id: str, *, page_size: int, cursor: Optional[str] = None
    ) -> ListPage:
        query = f"'{_quote(folder_id)}' in parents and trashed = false"
        try:
            response = (
                self._service.files()
                .list(
                    q=query,
                    fields="nextPageToken, files(id, name, mimeType)",
                    pageToken=cursor,
                    pageSize=page_size,
                    supportsAllDrives=True,
                    includeItemsFromAllDrives=True,
                )
                .execute()
            )
        except Exception as exc:
            raise ListError("Listing folder failed", folder_id=folder_id) from exc

        items = tuple(
            RemoteItem(
                identifier=entry["id"],
                name=entry.get("name", entry["id"]),
                content_kind=entry.get("mimeType", "application/octet-stream"),
            )
            for entry in response.get("files", []) or []
        )
        return ListPage(items=items, next_cursor=response.get("nextPageToken") or None)

    def export_content(self, item_id: str, target_kind: str) -> Iterator[bytes]:
        try:
            request = self._service.files().export_media(
                fileId=item_id, mimeType=target_kind
            )
        except Exception as exc:
            raise TransferError(
                f"Export to {target_kind} failed", item_id=item_id
            ) from exc
        return self._stream(item_id, request)

    def download_content(self, item_id: str) -> Iterator[bytes]:
        try:
            request = self._service.files().get_media(
                fileId=item_id, supportsAllDrives=True
            )
        except Exception as exc:
            raise TransferError("Download failed", item_id=item_id) from exc
        return self._stream(item_id, request)

    def soft_delete(self, item_id: str) -> None:
        try:
            self._service.files().update(
                fileId=item_id,
                body={"trashed": True},
                supportsAllDrives=True,
            ).execute()
        except Exception as exc:
            raise DeleteError("Moving file to trash failed", item_id=item_id) from exc

    def _stream(self, item_id: str, request: Any) -> Iterator[bytes]:
        from googleapiclient.http import MediaIoBaseDownload  # type: ignore

        buffer = io.BytesIO()
        downloader = MediaIoBaseDownload(buffer, request, chunksize=self._chunk_size)
        done = False
        while not done:
            try:
                _status, done = downloader.next_chunk()
            except Exception as exc:
                raise TransferError("Media transfer failed", item_id=item_id) from exc
            chunk = buffer.getvalue()
            buffer.seek(0)
            buffer.truncate(0)
            if chunk:
                yield chunk


__all__ = ["GoogleDriveStore", "DEFAULT_CHUNK_SIZE"]
