"""Filename generation utilities."""

import re

# HH:MM:SS bounded by word boundaries, e.g. the timestamp burned into a camera photo
TIME_PATTERN = re.compile(r'\b\d{2}:\d{2}:\d{2}\b')


def extract_time_token(text: str) -> str:
    """
    Extract the first HH:MM:SS time from OCR text as a filename-safe token.

    Only the leftmost match is used. Colons are replaced with periods so the
    token can be used as a filename on every common filesystem:

        "Photo taken at 14:23:05 on site" -> "14.23.05"

    Returns:
        The token, or an empty string if the text holds no time
    """
    if not text:
        return ""

    match = TIME_PATTERN.search(text)
    if not match:
        return ""

    return match.group(0).replace(':', '.')


def file_extension(name: str) -> str:
    """
    Return the extension of a filename, including the leading dot.

    Unlike Path.suffix, a name that is only an extension (".jpg") counts as
    having one. Matching against it is case-sensitive.
    """
    index = name.rfind('.')
    if index < 0:
        return ""
    return name[index:]


def output_filename(token: str, extension: str = ".jpg") -> str:
    """Build the output filename for a time token.

    An empty token yields a bare extension (".jpg").
    """
    return f"{token}{extension}"
