"""OCR timestamp renamer - copy photos under the HH:MM:SS time printed on them."""

__version__ = "1.0.0"

from ocrstamp.config import OcrConfig
from ocrstamp.errors import FileAccessError, NetworkError, OcrStampError, ResponseFormatError
from ocrstamp.filename import extract_time_token
from ocrstamp.models import OcrResult, RenamedImage
from ocrstamp.ocr_space_client import OCRSpaceClient, recognize
from ocrstamp.processor import process_images

__all__ = [
    'OcrConfig',
    'OCRSpaceClient',
    'OcrResult',
    'RenamedImage',
    'OcrStampError',
    'FileAccessError',
    'NetworkError',
    'ResponseFormatError',
    'extract_time_token',
    'process_images',
    'recognize',
]
