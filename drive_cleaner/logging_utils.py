"""Logging setup shared by the CLI and scheduled runs."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import IO, List, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class DailyLogFileHandler(logging.Handler):
    """Append records to ``<log_dir>/<YYYY-MM-DD>.log`` and drop stale days."""

    terminator = "\n"

    def __init__(self, log_dir: Path, *, keep_days: int = 7) -> None:
        super().__init__()
        self.log_dir = Path(log_dir)
        self.keep_days = max(keep_days, 1)
        self._day: Optional[date] = None
        self._stream: Optional[IO[str]] = None

    def emit(self, record: logging.LogRecord) -> None:
        try:
            stream = self._stream_for(datetime.now().date())
            stream.write(self.format(record) + self.terminator)
            stream.flush()
        except Exception:  # noqa: BLE001 - logging handlers report via handleError
            self.handleError(record)

    def close(self) -> None:
        try:
            if self._stream is not None:
                self._stream.close()
        finally:
            self._stream = None
            self._day = None
            super().close()

    def _stream_for(self, today: date) -> IO[str]:
        if self._stream is None or self._day != today:
            if self._stream is not None:
                self._stream.close()
            self.log_dir.mkdir(parents=True, exist_ok=True)
            self.prune(today)
            self._stream = (self.log_dir / f"{today.isoformat()}.log").open(
                "a", encoding="utf-8"
            )
            self._day = today
        return self._stream

    def prune(self, today: date) -> List[Path]:
        """Delete day files older than the retention window; return what was removed."""

        cutoff = today - timedelta(days=self.keep_days - 1)
        removed: List[Path] = []
        for path in sorted(self.log_dir.glob("*.log")):
            try:
                file_day = date.fromisoformat(path.stem)
            except ValueError:
                continue
            if file_day >= cutoff:
                continue
            try:
                path.unlink()
            except OSError:
                continue
            removed.append(path)
        return removed


def configure_logging(
    verbose: bool, log_dir: Path | None = None, *, keep_days: int = 7
) -> None:
    """Route root logging to the console and to daily files under ``log_dir``."""

    level = logging.DEBUG if verbose else logging.INFO
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    console.setLevel(level)
    root.addHandler(console)

    file_handler = DailyLogFileHandler(log_dir or Path.cwd() / "log", keep_days=keep_days)
    file_handler.setFormatter(formatter)
    file_handler.setLevel(level)
    root.addHandler(file_handler)

    logging.captureWarnings(True)


__all__ = ["DATE_FORMAT", "DailyLogFileHandler", "LOG_FORMAT", "configure_logging"]
