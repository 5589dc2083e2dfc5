"""Interactive selection of the input media file."""

import logging
from typing import Optional

from .exceptions import InputFileError

logger = logging.getLogger(__name__)

FILE_TYPES = (
    ("Video Files", "*.mp4 *.mkv *.avi *.mov"),
    ("Audio Files", "*.wav *.mp3 *.m4a"),
)

def pick_input_file(initial_dir: str = ".") -> Optional[str]:
    """
    Opens a native file dialog for choosing a video or audio file.

    Returns:
        The selected path, or None if the user cancelled the dialog.

    Raises:
        InputFileError: If no dialog can be shown (no Tk or no display).
    """
    try:
        import tkinter
        from tkinter import filedialog
    except ImportError as e:
        raise InputFileError(f"tkinter is not available, pass the input file with --input: {e}") from e

    try:
        root = tkinter.Tk()
    except tkinter.TclError as e:
        raise InputFileError(f"Cannot open a file dialog, pass the input file with --input: {e}") from e

    try:
        root.withdraw()
        selected = filedialog.askopenfilename(
            title="Select a video or audio file",
            initialdir=initial_dir,
            filetypes=FILE_TYPES,
        )
    finally:
        root.destroy()

    # askopenfilename returns '' (or an empty tuple on some platforms) on cancel
    if not selected:
        logger.debug("File selection cancelled.")
        return None
    return str(selected)
