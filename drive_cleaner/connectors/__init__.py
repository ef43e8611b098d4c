"""Store implementations for Drive Cleaner."""

from .base import ListPage, RemoteItem, RemoteStore
from .google_drive import GoogleDriveStore
from .local import LocalFolderStore

__all__ = [
    "GoogleDriveStore",
    "ListPage",
    "LocalFolderStore",
    "RemoteItem",
    "RemoteStore",
]
