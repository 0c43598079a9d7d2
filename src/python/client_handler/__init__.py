from .client_handler import ClientHandler
from .error_response import ErrorResponse
from .exceptions import ClientHandlerException, UpstreamException, UpstreamUnavailableException

__all__ = [
    "ClientHandler",
    "ClientHandlerException",
    "ErrorResponse",
    "UpstreamException",
    "UpstreamUnavailableException",
]
