"""Utility modules for dockertask."""

from .logging import setup_logging, get_logger
from .output import Reporter, render_table, render_mapping
from .streams import run_in_executor, iterate_blocking, iterate_records

__all__ = [
    "setup_logging",
    "get_logger",
    "Reporter",
    "render_table",
    "render_mapping",
    "run_in_executor",
    "iterate_blocking",
    "iterate_records",
]
