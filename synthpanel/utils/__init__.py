"""synthpanel utilities — hashing and logging helpers."""

from synthpanel.utils.hashing import compute_content_hash
from synthpanel.utils.logging import configure_logging, get_run_logger

__all__ = [
    "compute_content_hash",
    "configure_logging",
    "get_run_logger",
]
