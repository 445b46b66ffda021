"""
Execution mode selection for product imports.
"""

from enum import Enum

# Imports above this many rows run in the background worker
LARGE_IMPORT_THRESHOLD = 50


class ExecutionMode(str, Enum):
    """Where an import batch runs."""
    SYNCHRONOUS = "sync"
    BACKGROUND = "background"


def select_mode(row_count: int, queue_available: bool = True) -> ExecutionMode:
    """
    Pick inline or background execution.

    More than LARGE_IMPORT_THRESHOLD rows go to the background queue, but
    only if it is available; without a queue every import runs inline.
    """
    if row_count > LARGE_IMPORT_THRESHOLD and queue_available:
        return ExecutionMode.BACKGROUND
    return ExecutionMode.SYNCHRONOUS
