from .delivery_outcome import DeliveryOutcome, DeliveryStatus
from .key_kind import CreateIncidentKey, KeyKind, LinkIncidentKey, UnmatchedKey
from .link_request import LinkRequest
from .pass_summary import KeyOutcome, PassSummary

__all__ = [
    "CreateIncidentKey",
    "DeliveryOutcome",
    "DeliveryStatus",
    "KeyKind",
    "KeyOutcome",
    "LinkIncidentKey",
    "LinkRequest",
    "PassSummary",
    "UnmatchedKey"
]
