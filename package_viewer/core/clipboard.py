import logging

import pyperclip

from package_viewer.core.exceptions import ClipboardError


def copy_to_clipboard(text: str) -> None:
    """Places text on the system clipboard."""
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        logging.error(f"Clipboard access failed: {e}")
        raise ClipboardError(f"Clipboard access failed: {e}") from e
    logging.info(f"Copied {len(text)} characters to clipboard")
