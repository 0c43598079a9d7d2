import json
import logging
from typing import Any
from injector import inject, singleton
from mem2incident.exceptions import PayloadDecodeError
from mem2incident.models import LinkRequest

QUOTE_CHARS = '"'

@singleton
class PayloadNormalizerService:

    @inject
    def __init__(self):
        self.__logger = logging.getLogger(self.__class__.__name__)

    def normalize_incident(self, raw: bytes, auth_token: str) -> dict[str, Any]:
        """
        Turn a cached incident value into the record posted to the API.

        Producers store the incident either as a JSON object or as a JSON
        string whose content is the object (double-encoded); both decode
        to the same record.

        Args:
            raw: The value exactly as stored in memcached.
            auth_token: Token that replaces any `auth_token` in the value.

        Returns:
            The incident record with `domain` defaulted and `auth_token` set.

        Raises:
            PayloadDecodeError: If the value is not (double-encoded) JSON
                describing an object.
        """
        try:
            decoded: Any = json.loads(raw)
        except ValueError as e:
            raise PayloadDecodeError(f"value is not valid JSON: {e}") from e

        if isinstance(decoded, str):
            try:
                decoded = json.loads(decoded)
            except ValueError as e:
                raise PayloadDecodeError(f"escaped value is not valid JSON: {e}") from e

        if not isinstance(decoded, dict):
            raise PayloadDecodeError(f"expected a JSON object, got {type(decoded).__name__}")

        record: dict[str, Any] = decoded
        domain = record.get("domain")
        if isinstance(domain, str) and len(domain) > 0:
            self.__logger.debug(f"Assigned domain: {domain}")
        else:
            self.__logger.debug("The domain field is missing, empty or not a string, using default value")
            record["domain"] = ""

        record["auth_token"] = auth_token
        return record

    def build_link_request(self, parent_uuid: str, raw: bytes, auth_token: str) -> LinkRequest:
        """
        Build the link payload from the parent UUID in the key and the
        child UUID stored as the value.

        Raises:
            PayloadDecodeError: If the value is not text or is empty once
                surrounding quotes are removed.
        """
        try:
            child_uuid: str = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise PayloadDecodeError(f"child incident uuid is not valid UTF-8: {e}") from e

        child_uuid = child_uuid.strip().strip(QUOTE_CHARS)
        if not child_uuid:
            raise PayloadDecodeError("child incident uuid is empty")

        return LinkRequest(
            parent_incident_uuid=parent_uuid.strip(QUOTE_CHARS),
            child_incident_uuid=child_uuid,
            auth_token=auth_token,
        )
