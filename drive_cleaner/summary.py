"""Per-item results and the end-of-run summary."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .connectors.base import RemoteItem


class ItemState(enum.Enum):
    """Terminal states an item can reach during a run."""

    DELETED = "deleted"
    DELETE_FAILED = "delete_failed"
    TRANSFER_FAILED = "transfer_failed"


@dataclass(frozen=True, slots=True)
class ItemReport:
    """What happened to one remote item."""

    item: RemoteItem
    state: ItemState
    local_path: Optional[Path] = None
    error: Optional[BaseException] = None

    @property
    def transferred(self) -> bool:
        return self.state is not ItemState.TRANSFER_FAILED


@dataclass(slots=True)
class BatchSummary:
    """Counts accumulated across a run, plus the per-item reports."""

    seen: int = 0
    transferred: int = 0
    deleted: int = 0
    failed: int = 0
    reports: List[ItemReport] = field(default_factory=list)

    @property
    def transferred_not_deleted(self) -> int:
        return self.transferred - self.deleted

    def record(self, report: ItemReport) -> None:
        self.seen += 1
        self.reports.append(report)
        if report.state is ItemState.TRANSFER_FAILED:
            self.failed += 1
            return
        self.transferred += 1
        if report.state is ItemState.DELETED:
            self.deleted += 1

    def reports_in(self, state: ItemState) -> List[ItemReport]:
        return [report for report in self.reports if report.state is state]

    def render(self) -> str:
        """Return a human-readable multi-line summary."""

        lines = [
            f"Items seen: {self.seen}",
            f"Downloaded and trashed: {self.deleted}",
            f"Downloaded but still in remote folder: {self.transferred_not_deleted}",
            f"Failed (left untouched): {self.failed}",
        ]
        for report in self.reports_in(ItemState.DELETE_FAILED):
            lines.append(
                f"  NOT TRASHED {report.item.name} ({report.item.identifier}) "
                f"-> {report.local_path}: {report.error}"
            )
        for report in self.reports_in(ItemState.TRANSFER_FAILED):
            lines.append(
                f"  FAILED {report.item.name} ({report.item.identifier}): {report.error}"
            )
        return "\n".join(lines)


__all__ = ["BatchSummary", "ItemReport", "ItemState"]
