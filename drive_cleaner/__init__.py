"""Top-level package for Drive Cleaner."""

from .config import AppConfig, load_config
from .processor import BatchRunner, ItemProcessor, build_runner
from .summary import BatchSummary, ItemState

__all__ = [
    "AppConfig",
    "BatchRunner",
    "BatchSummary",
    "ItemProcessor",
    "ItemState",
    "build_runner",
    "load_config",
]
