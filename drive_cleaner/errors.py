"""Exception hierarchy for Drive Cleaner.

Errors fall into two families:

- ``FatalError`` subclasses abort the whole run (credentials, output
  directory, listing).
- ``ItemError`` subclasses are raised by store operations on a single item
  and are recorded against that item while the batch carries on.

``EXIT_CODES`` maps each family to the process exit status used by the CLI.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class CleanerError(Exception):
    """Base class carrying optional diagnostic context."""

    def __init__(
        self,
        message: str = "",
        *,
        folder_id: Optional[str] = None,
        item_id: Optional[str] = None,
        path: Optional[str | Path] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.folder_id = folder_id
        self.item_id = item_id
        self.path = path

    def __str__(self) -> str:
        parts = [self.message] if self.message else []
        if self.folder_id:
            parts.append(f"folder={self.folder_id}")
        if self.item_id:
            parts.append(f"item={self.item_id}")
        if self.path:
            parts.append(f"path={self.path}")
        cause = self.__cause__
        if cause is not None:
            parts.append(f"cause={type(cause).__name__}: {cause}")
        return " | ".join(parts)


class FatalError(CleanerError):
    """Pre-flight failure that stops the run."""


class AuthError(FatalError):
    """Credentials could not be loaded or the API client could not be built."""


class OutputDirectoryError(FatalError):
    """The local output directory could not be created."""


class ListError(FatalError):
    """Listing the target folder failed."""


class ItemError(CleanerError):
    """Failure confined to a single remote item."""


class TransferError(ItemError):
    """Downloading or exporting an item failed."""


class DeleteError(ItemError):
    """Moving an item to the trash failed."""


EXIT_CODES: dict[type[BaseException], int] = {
    AuthError: 3,
    OutputDirectoryError: 4,
    ListError: 5,
    ValueError: 2,
    FileNotFoundError: 2,
}


def exit_code_for(exc: BaseException) -> int:
    """Return the process exit status for ``exc`` (1 when unmapped)."""

    for exc_type, code in EXIT_CODES.items():
        if isinstance(exc, exc_type):
            return code
    return 1


__all__ = [
    "AuthError",
    "CleanerError",
    "DeleteError",
    "EXIT_CODES",
    "FatalError",
    "ItemError",
    "ListError",
    "OutputDirectoryError",
    "TransferError",
    "exit_code_for",
]
