"""Custom exceptions for the intake context."""

from typing import Optional


class PhotoDownloadError(Exception):
    """
    Exception raised when a remote photo cannot be downloaded.

    Attributes:
        message: Error description
        url: URL that was being fetched
        status_code: Terminal HTTP status (None for transport errors)
    """

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message
        self.url = url
        self.status_code = status_code

        parts = [message]
        if status_code is not None:
            parts.append(f"HTTP {status_code}")
        if url:
            parts.append(f"URL: {url}")

        super().__init__(" | ".join(parts))


class TooManyRedirectsError(PhotoDownloadError):
    """Exception raised when a photo URL keeps redirecting past the allowed hop count."""

    pass
