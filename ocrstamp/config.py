"""OCR.space client configuration."""

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_ENDPOINT = "https://api.ocr.space/parse/image"
API_KEY_ENV = "OCR_SPACE_API_KEY"


@dataclass(frozen=True)
class OcrConfig:
    """Settings sent with every OCR request.

    Attributes:
        api_key: OCR.space API key
        language: OCR language hint (OCR.space language code, e.g. "pol", "eng")
        engine: OCR engine variant ("1", "2" or "3")
        overlay: Request word positions along with the text
        endpoint: URL the image is posted to
        timeout: Request timeout in seconds (None waits indefinitely)
    """
    api_key: str
    language: str = "pol"
    engine: str = "2"
    overlay: bool = False
    endpoint: str = DEFAULT_ENDPOINT
    timeout: Optional[float] = None


def resolve_api_key(api_key: Optional[str] = None) -> str:
    """Return the API key from the argument or the OCR_SPACE_API_KEY environment variable."""
    api_key = api_key or os.getenv(API_KEY_ENV)
    if not api_key:
        raise ValueError(f"OCR.space API key must be provided or set in {API_KEY_ENV} environment variable")
    return api_key
