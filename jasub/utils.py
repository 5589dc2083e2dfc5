"""Utility functions for JaSub."""

import os
import logging
from typing import Optional
from .exceptions import FileSystemError

logger = logging.getLogger(__name__)

MS_PER_TICK = 10

def ensure_dir_exists(dir_path: str) -> None:
    """
    Ensures that a directory exists. Creates it if it doesn't.

    Args:
        dir_path: The path to the directory.

    Raises:
        FileSystemError: If the directory cannot be created due to permissions
                         or if the path exists but is not a directory.
    """
    if not dir_path:
        raise ValueError("Directory path cannot be empty.")
    try:
        if not os.path.exists(dir_path):
            os.makedirs(dir_path)
            logger.info(f"Created directory: {dir_path}")
        elif not os.path.isdir(dir_path):
            raise FileSystemError(f"Path exists but is not a directory: {dir_path}")
    except OSError as e:
        logger.error(f"Error creating or accessing directory {dir_path}: {e}", exc_info=True)
        raise FileSystemError(f"Could not create or access directory {dir_path}: {e}") from e

def remove_file(file_path: Optional[str]) -> bool:
    """Removes a file if it exists. Returns True when something was deleted."""
    if not file_path or not os.path.exists(file_path):
        return False
    try:
        os.remove(file_path)
        return True
    except OSError as e:
        logger.warning(f"Could not remove file {file_path}: {e}")
        return False

def format_time_srt(ticks: int) -> str:
    """
    Formats engine ticks (10 ms units) into SRT time format HH:MM:SS,mmm.

    Integer arithmetic only, so the result is identical on every platform.
    Hours are at least two digits wide and grow past 99 instead of wrapping.

    Args:
        ticks: Time in 10 millisecond ticks.

    Returns:
        Formatted time string.

    Raises:
        ValueError: If ticks is negative.
    """
    if ticks < 0:
        raise ValueError(f"Tick count cannot be negative: {ticks}")
    milliseconds = ticks * MS_PER_TICK
    total_seconds = milliseconds // 1000
    ms = milliseconds % 1000
    total_minutes = total_seconds // 60
    secs = total_seconds % 60
    hrs = total_minutes // 60
    mins = total_minutes % 60
    return f"{hrs:02d}:{mins:02d}:{secs:02d},{ms:03d}"
