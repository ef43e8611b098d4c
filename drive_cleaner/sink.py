"""Write transferred content under the local output directory."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable

from .errors import OutputDirectoryError

LOGGER = logging.getLogger(__name__)


class LocalFileSink:
    """Persist byte streams as files inside a single directory.

    Each file is streamed into a temporary sibling and moved onto its final
    name only once the stream is exhausted, so an interrupted transfer never
    leaves a partial file behind.
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory).expanduser().resolve()
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OutputDirectoryError(
                "Unable to create output directory", path=self.directory
            ) from exc
        # NamedTemporaryFile creates 0600 files; finished files get the umask default.
        umask = os.umask(0)
        os.umask(umask)
        self._file_mode = 0o666 & ~umask

    def resolve(self, filename: str) -> Path:
        """Return the destination for ``filename``; it must stay inside the directory."""

        destination = (self.directory / filename).resolve()
        if destination.parent != self.directory:
            raise ValueError(f"File name escapes the output directory: {filename!r}")
        return destination

    def write(self, filename: str, chunks: Iterable[bytes]) -> Path:
        destination = self.resolve(filename)
        if destination.exists():
            raise FileExistsError(f"Refusing to overwrite existing file: {destination}")

        with tempfile.NamedTemporaryFile(
            mode="wb", delete=False, dir=str(self.directory), prefix=".partial-"
        ) as tmp:
            tmp_name = tmp.name
            try:
                written = 0
                for chunk in chunks:
                    tmp.write(chunk)
                    written += len(chunk)
                tmp.flush()
                os.fsync(tmp.fileno())
            except BaseException:
                tmp.close()
                _discard(tmp_name)
                raise
        try:
            os.chmod(tmp_name, self._file_mode)
            os.replace(tmp_name, destination)
        except OSError:
            _discard(tmp_name)
            raise
        LOGGER.debug("Wrote %s byte(s) to %s", written, destination)
        return destination


def _discard(path: str) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass


__all__ = ["LocalFileSink"]
