import json
import httpx
from http import HTTPStatus
from typing import Any, Optional
from client_handler import ClientHandler, UpstreamException, UpstreamUnavailableException
from mem2incident.configs import Mem2IncidentConfig
from mem2incident.models import DeliveryOutcome, LinkRequest

LINK_API = "link"

class IncidentsApiClient(ClientHandler):
    """
    Delivers incidents and incident links to the incidents REST API.

    Only HTTP 201 counts as acceptance. The API is expected to
    deduplicate by incident UUID, because a key whose delete failed
    after acceptance is delivered again on the next pass.
    """

    def __init__(self,
                 api_endpoint: str,
                 verify: bool = True,
                 timeout: float = 10.0,
                 transport: Optional[httpx.BaseTransport] = None) -> None:
        super().__init__(host=api_endpoint, default_timeout=timeout, verify=verify, transport=transport)

    @staticmethod
    def from_config(config: Mem2IncidentConfig) -> "IncidentsApiClient":
        return IncidentsApiClient(
            api_endpoint=config.api_endpoint,
            verify=config.verify_tls,
            timeout=config.api_timeout,
        )

    def create_incident(self, record: dict[str, Any]) -> DeliveryOutcome:
        return self.__deliver(api="", request=record, action="create incident")

    def link_incidents(self, request: LinkRequest) -> DeliveryOutcome:
        return self.__deliver(api=LINK_API, request=request.model_dump(), action="link incidents")

    def __deliver(self, api: str, request: dict, action: str) -> DeliveryOutcome:
        try:
            self.invoke(api=api, request=request, expected_status=HTTPStatus.CREATED)
        except UpstreamException as e:
            return DeliveryOutcome.rejected(self.__rejection_reason(action, e), status_code=e.status_code)
        except UpstreamUnavailableException as e:
            return DeliveryOutcome.transport_error(f"failed to {action}: {e.reason}")
        return DeliveryOutcome.accepted(int(HTTPStatus.CREATED))

    def __rejection_reason(self, action: str, e: UpstreamException) -> str:
        errors: Any = e.error_response.errors if e.error_response is not None else None
        if errors is None:
            return f"failed to {action}, status code: {e.status_code}"
        if isinstance(errors, str):
            return f"failed to {action}: {errors}"
        return f"failed to {action}: {json.dumps(errors)}"
