"""Result of delivering one payload to the incidents API."""

from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel


class DeliveryStatus(str, enum.Enum):
    """How the incidents API handled a delivery."""

    ACCEPTED = "accepted"
    REJECTED = "rejected"
    TRANSPORT_ERROR = "transport_error"


class DeliveryOutcome(BaseModel):
    """Outcome of a create or link call.

    Attributes:
        status: Accepted (HTTP 201), rejected (any other status) or
            transport error (the API was never reached).
        reason: Decoded ``errors`` field, bare status code, or the
            transport failure, for anything but acceptance.
        status_code: HTTP status when the API answered.
    """

    status: DeliveryStatus
    reason: Optional[str] = None
    status_code: Optional[int] = None

    @property
    def is_accepted(self) -> bool:
        return self.status == DeliveryStatus.ACCEPTED

    @staticmethod
    def accepted(status_code: int = 201) -> DeliveryOutcome:
        return DeliveryOutcome(status=DeliveryStatus.ACCEPTED, status_code=status_code)

    @staticmethod
    def rejected(reason: str, status_code: Optional[int] = None) -> DeliveryOutcome:
        return DeliveryOutcome(status=DeliveryStatus.REJECTED, reason=reason, status_code=status_code)

    @staticmethod
    def transport_error(reason: str) -> DeliveryOutcome:
        return DeliveryOutcome(status=DeliveryStatus.TRANSPORT_ERROR, reason=reason)
