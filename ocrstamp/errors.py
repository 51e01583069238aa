"""Error types raised while renaming images."""


class OcrStampError(RuntimeError):
    """Base class for all errors that abort a batch."""


class FileAccessError(OcrStampError):
    """A file or directory could not be opened, listed, read or written."""


class NetworkError(OcrStampError):
    """The OCR request could not be sent or its response was not received."""


class ResponseFormatError(OcrStampError):
    """The OCR service answered with a body that is not the expected JSON."""
