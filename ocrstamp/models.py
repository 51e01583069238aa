"""Data models for OCR results and renamed images."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from ocrstamp.errors import ResponseFormatError


def _get(payload: Dict[str, Any], key: str, expected: type, default: Any) -> Any:
    """Read an optional field, rejecting values of the wrong type."""
    value = payload.get(key)
    if value is None:
        return default
    # bool is a subclass of int; don't accept true/false where a number is expected
    if isinstance(value, bool) and expected is not bool:
        raise ResponseFormatError(f"Field {key!r} has unexpected type bool")
    if not isinstance(value, expected):
        raise ResponseFormatError(f"Field {key!r} has unexpected type {type(value).__name__}")
    return value


@dataclass
class OverlayWord:
    """A recognized word and its bounding box (only present when overlay was requested)."""
    text: str
    left: int = 0
    top: int = 0
    height: int = 0
    width: int = 0

    @classmethod
    def from_dict(cls, payload: Any) -> "OverlayWord":
        if not isinstance(payload, dict):
            raise ResponseFormatError("Overlay word is not an object")
        return cls(
            text=_get(payload, "WordText", str, ""),
            left=_get(payload, "Left", int, 0),
            top=_get(payload, "Top", int, 0),
            height=_get(payload, "Height", int, 0),
            width=_get(payload, "Width", int, 0),
        )


@dataclass
class ParsedResult:
    """One entry of ParsedResults."""
    parsed_text: str = ""
    error_message: str = ""
    error_details: str = ""
    file_parse_exit_code: int = 0
    text_orientation: str = ""
    overlay_words: List[OverlayWord] = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: Any) -> "ParsedResult":
        if not isinstance(payload, dict):
            raise ResponseFormatError("Parsed result is not an object")

        overlay = _get(payload, "TextOverlay", dict, {})
        words = _get(overlay, "Words", list, [])

        return cls(
            parsed_text=_get(payload, "ParsedText", str, ""),
            error_message=_get(payload, "ErrorMessage", str, ""),
            error_details=_get(payload, "ErrorDetails", str, ""),
            file_parse_exit_code=_get(payload, "FileParseExitCode", int, 0),
            text_orientation=_get(payload, "TextOrientation", str, ""),
            overlay_words=[OverlayWord.from_dict(word) for word in words],
        )


@dataclass
class OcrResult:
    """Parsed OCR.space response for a single image."""
    is_errored_on_processing: bool = False
    error_message: str = ""
    ocr_exit_code: int = 0
    processing_time_ms: str = ""
    processing_error: str = ""
    parsed_results: List[ParsedResult] = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: Any) -> "OcrResult":
        """
        Build a result from the decoded JSON body.

        Unknown fields are ignored and missing or null fields fall back to
        defaults. A null body decodes to an empty result.

        Raises:
            ResponseFormatError: If the body is not an object or a known field has the wrong type
        """
        if payload is None:
            return cls()
        if not isinstance(payload, dict):
            raise ResponseFormatError(f"Expected a JSON object, got {type(payload).__name__}")

        parsed_results = _get(payload, "ParsedResults", list, [])

        return cls(
            is_errored_on_processing=_get(payload, "IsErroredOnProcessing", bool, False),
            error_message=_get(payload, "ErrorMessage", str, ""),
            ocr_exit_code=_get(payload, "OCRExitCode", int, 0),
            processing_time_ms=_get(payload, "ProcessingTimeInMilliseconds", str, ""),
            processing_error=_get(payload, "ProcessingError", str, ""),
            parsed_results=[ParsedResult.from_dict(entry) for entry in parsed_results],
        )

    @property
    def text(self) -> Optional[str]:
        """Text of the first parsed result, or None when the service parsed nothing."""
        if not self.parsed_results:
            return None
        return self.parsed_results[0].parsed_text


@dataclass
class RenamedImage:
    """Outcome for one processed image.

    destination and token are None when OCR returned no parsed results.
    """
    source: Path
    destination: Optional[Path] = None
    token: Optional[str] = None

    @property
    def skipped(self) -> bool:
        return self.destination is None


@dataclass
class ProgressState:
    """Processed count out of a total fixed before processing starts."""
    total: int
    processed: int = 0

    @property
    def percent(self) -> int:
        return progress_percent(self.processed, self.total)

    @property
    def finished(self) -> bool:
        return self.processed == self.total


def progress_percent(done: int, total: int) -> int:
    """Percentage of work done, truncated to an integer (0 when total is 0)."""
    if total <= 0:
        return 0
    return int(done / total * 100)
