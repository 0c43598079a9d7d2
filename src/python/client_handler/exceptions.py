from typing import Optional
from .error_response import ErrorResponse

class ClientHandlerException(Exception):
    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(message)

class UpstreamException(ClientHandlerException):
    """The upstream answered, but not with the expected status."""

    def __init__(self, url: str, status_code: int, error_response: Optional[ErrorResponse] = None):
        self.status_code = status_code
        self.error_response = error_response
        super().__init__(url, f"Upstream {url} responded with status code {status_code}")

class UpstreamUnavailableException(ClientHandlerException):
    """The upstream could not be reached (connection, timeout, TLS)."""

    def __init__(self, url: str, reason: str):
        self.reason = reason
        super().__init__(url, f"Upstream {url} is unavailable: {reason}")
