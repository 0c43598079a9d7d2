import httpx
import logging
from abc import ABC
from http import HTTPStatus
from time import time
from typing import Optional
from prometheus_client import Counter, Histogram
from .error_response import ErrorResponse
from .exceptions import UpstreamException, UpstreamUnavailableException

API_EXE_COUNTER = Counter("m2i_client_exe_total", "Total number of API requests executed", ["handler"])
API_EXE_DURATION_HISTOGRAM = Histogram("m2i_client_exe_duration_seconds", "Duration of API requests in seconds", ["handler"])
API_EXE_ERROR_COUNTER = Counter("m2i_client_exe_error_total", "Total number of API requests that resulted in error", ["handler", "status_code"])

class ClientHandler(ABC):

    def __init__(self,
                 host: str,
                 default_timeout: float = 10.0,
                 verify: bool = True,
                 transport: Optional[httpx.BaseTransport] = None):
        self.__logger = logging.getLogger(self.__class__.__name__)
        self.__http_client = httpx.Client(timeout=default_timeout, verify=verify, transport=transport)
        self.__host = host.rstrip("/")

    def invoke(self,
               api: str,
               request: dict,
               expected_status: HTTPStatus = HTTPStatus.OK,
               timeout: Optional[float] = None,
               headers: Optional[dict] = None) -> dict:
        start_time: float = time()
        API_EXE_COUNTER.labels(handler=self.__class__.__name__).inc()
        url: str = f"{self.__host}/{api.lstrip('/')}" if api else self.__host
        try:
            # Body carries the auth token, so only the target is logged
            self.__logger.debug(f"[EXTERNAL] POST {url}")

            # Execute HTTP request
            try:
                response = self.__http_client.post(
                    url,
                    json=request,
                    timeout=timeout or httpx.USE_CLIENT_DEFAULT,
                    headers=headers,
                )
            except httpx.TransportError as e1:
                self.__logger.info(f"Full Response: <unavailable | {type(e1).__name__}: {e1}>")
                API_EXE_ERROR_COUNTER.labels(handler=self.__class__.__name__, status_code="transport").inc()
                raise UpstreamUnavailableException(url, f"{type(e1).__name__}: {e1}") from e1

            # Parse response
            if response.status_code == expected_status:
                return self.__parse_body(response)

            error_response: Optional[ErrorResponse] = ErrorResponse.parse(response.content)
            self.__logger.info(f"Full Response: <{response.status_code} | {error_response or response.text[:200]}>")
            API_EXE_ERROR_COUNTER.labels(handler=self.__class__.__name__, status_code=response.status_code).inc()
            raise UpstreamException(url, response.status_code, error_response)
        finally:
            duration: float = time() - start_time
            API_EXE_DURATION_HISTOGRAM.labels(handler=self.__class__.__name__).observe(duration)

    def close(self) -> None:
        self.__http_client.close()

    def __parse_body(self, response: httpx.Response) -> dict:
        # Success bodies are informative only; an empty or non-JSON body is fine
        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}
