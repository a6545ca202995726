"""
Custom exception classes for the application.

This module defines custom exceptions for better error handling and
more specific error reporting throughout the application.
"""


class MediaServerError(Exception):
    """
    Call to the media server failed.

    Raised when a request to the media server cannot be sent, times out,
    or is answered with a non-success status.

    Attributes:
        path: The media server path that was called.
        status_code: HTTP status returned by the media server, if any.
    """

    def __init__(
        self, path: str, detail: str, status_code: int | None = None
    ) -> None:
        self.path = path
        self.detail = detail
        self.status_code = status_code
        super().__init__(f"{path}: {detail}")
