import logging
from typing import Callable, Dict, Optional, Union

from package_viewer.core.clipboard import copy_to_clipboard
from package_viewer.core.exceptions import ClipboardError, FetchError, NoDataError
from package_viewer.core.formatting import build_sections, compose_message
from package_viewer.core.models import FormattedSection, PackageResponse, SectionName


class PackageSession:
    """
    Owns the last fetched response and everything derived from it.

    One instance lives for the life of the window and is only touched from the
    Tk thread. Fetch failures keep the last good data; copy failures raise so
    the caller can surface them.
    """

    def __init__(
        self,
        fetcher: Callable[[], PackageResponse],
        clipboard: Callable[[str], None] = copy_to_clipboard,
        game_id: Optional[str] = None,
    ):
        self._fetcher = fetcher
        self._clipboard = clipboard
        self.game_id = game_id
        self._response: Optional[PackageResponse] = None
        self._sections: Dict[SectionName, FormattedSection] = {}
        self._message: str = ""
        self.last_error: Optional[str] = None

    @property
    def response(self) -> Optional[PackageResponse]:
        return self._response

    @property
    def sections(self) -> Dict[SectionName, FormattedSection]:
        return dict(self._sections)

    @property
    def message(self) -> str:
        return self._message

    @property
    def has_data(self) -> bool:
        return self._response is not None

    def fetch(self) -> bool:
        """Fetches fresh data. Returns False and records last_error on failure."""
        return self.receive(self.request())

    def request(self) -> Union[PackageResponse, FetchError]:
        """
        Calls the fetcher and returns the response, or the FetchError it raised.

        Holds no state, so the GUI runs this half of fetch() on a worker thread
        and hands the result to receive() on the Tk thread.
        """
        try:
            return self._fetcher()
        except FetchError as e:
            return e

    def receive(self, result: Union[PackageResponse, FetchError]) -> bool:
        if isinstance(result, FetchError):
            self.fetch_failed(result)
            return False
        self.apply(result)
        return True

    def apply(self, response: PackageResponse):
        """Replaces the held response and recomputes every section."""
        self._response = response
        self._sections = build_sections(response, self.game_id)
        self._message = compose_message(self._sections)
        self.last_error = None
        logging.info("Rebuilt package sections")

    def fetch_failed(self, error: FetchError):
        """Records a failed fetch without touching the data already held."""
        logging.error(f"Fetch failed, keeping previous data: {error}")
        self.last_error = f"Error fetching data: {error}"

    def copy_section(self, name: SectionName):
        name = SectionName(name)
        if not self._sections:
            self._fail(NoDataError())
        self._copy(self._sections[name].copy_text, name.label)

    def copy_all(self):
        if not self._message:
            self._fail(NoDataError())
        self._copy(self._message, "full message")

    def clear(self):
        self._response = None
        self._sections = {}
        self._message = ""
        self.last_error = None
        logging.info("Cleared package data")

    def _copy(self, text: str, what: str):
        try:
            self._clipboard(text)
        except ClipboardError as e:
            self._fail(e)
        logging.info(f"Copied {what} to clipboard")

    def _fail(self, error: ClipboardError):
        self.last_error = str(error)
        raise error
