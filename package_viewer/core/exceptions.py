"""
Exception hierarchy for the package viewer.

Everything derives from PackageViewerError so the GUI can catch broadly and
show the message in its status line.
"""


class PackageViewerError(Exception):
    """Base class for all package viewer exceptions."""


class FetchError(PackageViewerError):
    """Raised when the package document cannot be fetched, parsed or validated."""


class ClipboardError(PackageViewerError):
    """Raised when text cannot be placed on the system clipboard."""


class NoDataError(ClipboardError):
    """Raised when a copy is requested before any data has been fetched."""

    def __init__(self, message: str = "Nothing to copy yet. Press 'Fetch Data' first.") -> None:
        super().__init__(message)
