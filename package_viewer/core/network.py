import logging
from typing import Optional

import requests
from pydantic import ValidationError

from package_viewer.core.exceptions import FetchError
from package_viewer.core.models import Config, PackageResponse


class NetworkManager:
    """Handles the single API call the viewer makes."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()

    def build_params(self) -> dict:
        params = {"launcher_id": self.config.launcher_id}
        if self.config.game_id:
            params["game_ids[]"] = self.config.game_id
        return params

    def fetch_packages(self) -> PackageResponse:
        """
        Fetches the getGamePackages document and validates it.

        Raises:
            FetchError: On network errors, a body that is not JSON, a payload
                that does not validate, or a non-zero API retcode.
        """
        url = self.config.api_url
        try:
            logging.info(f"Fetching game packages from {url}")
            response = requests.get(url, params=self.build_params(), timeout=self.config.request_timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logging.error(f"Error fetching game packages: {e}")
            raise FetchError(f"Request error: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            logging.error(f"Game packages response is not valid JSON: {e}")
            raise FetchError(f"JSON parse error: {e}") from e

        try:
            packages = PackageResponse.model_validate(payload)
        except ValidationError as e:
            logging.error(f"Game packages response has an unexpected shape: {e}")
            raise FetchError(f"Unexpected response format: {e.error_count()} validation error(s)") from e

        if packages.retcode != 0:
            logging.error(f"API returned retcode {packages.retcode}: {packages.message}")
            raise FetchError(f"API returned an error: {packages.message}")

        logging.info("Successfully fetched and parsed game packages")
        return packages
