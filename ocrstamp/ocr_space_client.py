"""OCR.space API client for recognizing text in image files."""

import logging
from pathlib import Path
from typing import Optional, Union

import requests

from ocrstamp.config import OcrConfig
from ocrstamp.errors import FileAccessError, NetworkError, ResponseFormatError
from ocrstamp.models import OcrResult

logger = logging.getLogger(__name__)


class OCRSpaceClient:
    """Uploads images to OCR.space, one synchronous request per image."""

    def __init__(self, config: OcrConfig, session: Optional[requests.Session] = None):
        """Initialize the client with its configuration and an optional session to reuse."""
        self.config = config
        self.session = session or requests.Session()
        self.session.headers.update({
            'accept': 'application/json',
        })

    def _form_fields(self) -> dict:
        return {
            'apikey': self.config.api_key,
            'language': self.config.language,
            'OCREngine': self.config.engine,
            'isOverlayRequired': 'true' if self.config.overlay else 'false',
        }

    def recognize(self, path: Union[str, Path]) -> OcrResult:
        """
        Run OCR on a single image file.

        Args:
            path: Image file to upload

        Returns:
            The parsed OCR result

        Raises:
            FileAccessError: If the file cannot be opened or read
            NetworkError: If the request fails or the response is cut short
            ResponseFormatError: If the response body is not the expected JSON
        """
        path = Path(path)

        try:
            with open(path, 'rb') as f:
                content = f.read()
        except OSError as e:
            raise FileAccessError(f"Cannot read {path}: {e}") from e

        logger.debug(f"Uploading {path.name} ({len(content)} bytes) to {self.config.endpoint}")

        try:
            response = self.session.post(
                self.config.endpoint,
                data=self._form_fields(),
                files={'file': (path.name, content)},
                timeout=self.config.timeout,
            )
            # Force the full body to be read inside the try so interrupted reads are network errors
            body = response.content
        except requests.RequestException as e:
            raise NetworkError(f"OCR request for {path.name} failed: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            preview = body[:200].decode('utf-8', errors='replace')
            raise ResponseFormatError(
                f"OCR response for {path.name} is not valid JSON (HTTP {response.status_code}): {preview}"
            ) from e

        try:
            result = OcrResult.from_dict(payload)
        except ResponseFormatError as e:
            raise ResponseFormatError(f"Unexpected OCR response for {path.name} (HTTP {response.status_code}): {e}") from e

        if result.is_errored_on_processing:
            logger.warning(f"OCR.space reported an error for {path.name}: {result.error_message}")
        else:
            logger.debug(f"OCR for {path.name} finished in {result.processing_time_ms} ms")

        return result


def recognize(path: Union[str, Path], config: OcrConfig, session: Optional[requests.Session] = None) -> OcrResult:
    """Run OCR on a single image file with a one-off client."""
    return OCRSpaceClient(config, session=session).recognize(path)
