"""Download-then-trash orchestration."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from .auth import authenticate
from .config import AppConfig
from .connectors.base import RemoteItem, RemoteStore
from .connectors.google_drive import GoogleDriveStore
from .connectors.local import LocalFolderStore
from .errors import ListError
from .export_policy import DocumentExportPolicy
from .sink import LocalFileSink
from .summary import BatchSummary, ItemReport, ItemState

LOGGER = logging.getLogger("drive_cleaner")


@dataclass(frozen=True, slots=True)
class TransferSucceeded:
    path: Path


@dataclass(frozen=True, slots=True)
class TransferFailed:
    cause: BaseException


TransferOutcome = Union[TransferSucceeded, TransferFailed]


@dataclass(slots=True)
class ItemProcessor:
    """Move one remote item to local disk, then to the remote trash.

    The trash call is made only after the local file has been written in
    full. Errors never escape ``process``; they end up in the returned report.
    """

    store: RemoteStore
    sink: LocalFileSink
    policy: DocumentExportPolicy

    def transfer(self, item: RemoteItem) -> TransferOutcome:
        target = self.policy.lookup(item.content_kind)
        try:
            if target is not None:
                filename = f"{item.name}.{target.extension}"
                LOGGER.info(
                    "Exporting %s to .%s (%s)", item.name, target.extension, target.mime_type
                )
                chunks = self.store.export_content(item.identifier, target.mime_type)
            else:
                if self.policy.is_workspace_kind(item.content_kind):
                    LOGGER.warning(
                        "No export mapping for %s (%s); attempting a direct download",
                        item.name,
                        item.content_kind,
                    )
                filename = item.name
                LOGGER.info("Downloading %s (%s)", item.name, item.content_kind)
                chunks = self.store.download_content(item.identifier)
            path = self.sink.write(filename, chunks)
        except Exception as exc:
            LOGGER.error("Transfer failed for %s: %s", item.name, exc)
            return TransferFailed(exc)
        LOGGER.info("Saved %s", path)
        return TransferSucceeded(path)

    def process(self, item: RemoteItem) -> ItemReport:
        outcome = self.transfer(item)
        if isinstance(outcome, TransferFailed):
            LOGGER.info("Skipping trash for %s; transfer did not complete", item.name)
            return ItemReport(item, ItemState.TRANSFER_FAILED, error=outcome.cause)

        try:
            self.store.soft_delete(item.identifier)
        except Exception as exc:
            LOGGER.error(
                "Could not move %s to trash; local copy kept at %s: %s",
                item.name,
                outcome.path,
                exc,
            )
            return ItemReport(
                item, ItemState.DELETE_FAILED, local_path=outcome.path, error=exc
            )
        LOGGER.info("Moved %s to trash", item.name)
        return ItemReport(item, ItemState.DELETED, local_path=outcome.path)


@dataclass(slots=True)
class BatchRunner:
    """Empty one remote folder into a local directory."""

    store: RemoteStore
    policy: DocumentExportPolicy
    page_size: int = 100

    def list_items(self, folder_id: str) -> List[RemoteItem]:
        items: List[RemoteItem] = []
        cursor: Optional[str] = None
        while True:
            try:
                page = self.store.list_children(
                    folder_id, page_size=self.page_size, cursor=cursor
                )
            except ListError:
                raise
            except Exception as exc:
                raise ListError("Listing folder failed", folder_id=folder_id) from exc
            items.extend(page.items)
            cursor = page.next_cursor
            if not cursor:
                return items

    def run(self, folder_id: str, output_dir: str | Path) -> BatchSummary:
        sink = LocalFileSink(output_dir)
        LOGGER.info("Local output directory ready: %s", sink.directory)

        LOGGER.info("Searching for files in folder %s", folder_id)
        items = self.list_items(folder_id)
        summary = BatchSummary()
        if not items:
            LOGGER.info("No files found in folder %s", folder_id)
            return summary

        LOGGER.info("Found %s file(s); starting download and cleanup", len(items))
        processor = ItemProcessor(store=self.store, sink=sink, policy=self.policy)
        for item in items:
            LOGGER.info("Processing %s (%s)", item.name, item.identifier)
            summary.record(processor.process(item))

        for line in summary.render().splitlines():
            LOGGER.info(line)
        return summary


def build_store(
    config: AppConfig,
    *,
    force_console_oauth: bool = False,
    force_token_refresh: bool = False,
) -> RemoteStore:
    """Return the configured store, authenticating first for Google Drive."""

    if config.provider == "google_drive":
        if not config.google_drive:
            raise ValueError("Google Drive configuration missing")
        service = authenticate(
            config.google_drive,
            force_console_oauth=force_console_oauth,
            force_token_refresh=force_token_refresh,
        )
        return GoogleDriveStore(service)
    if config.provider == "local":
        if not config.local:
            raise ValueError("Local folder configuration missing")
        return LocalFolderStore(trash_directory=config.local.trash_directory)
    raise ValueError(f"Unsupported provider: {config.provider}")


def build_runner(
    config: AppConfig,
    *,
    force_console_oauth: bool = False,
    force_token_refresh: bool = False,
    store: RemoteStore | None = None,
) -> BatchRunner:
    """Construct the batch runner for the configured provider."""

    return BatchRunner(
        store=store
        or build_store(
            config,
            force_console_oauth=force_console_oauth,
            force_token_refresh=force_token_refresh,
        ),
        policy=DocumentExportPolicy.with_overrides(config.export_mapping),
        page_size=config.page_size,
    )


__all__ = [
    "BatchRunner",
    "ItemProcessor",
    "TransferFailed",
    "TransferOutcome",
    "TransferSucceeded",
    "build_runner",
    "build_store",
]
