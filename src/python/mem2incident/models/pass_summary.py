import enum
from pydantic import BaseModel, Field

class KeyOutcome(str, enum.Enum):
    UNMATCHED = "unmatched"
    NOT_FOUND = "not_found"
    FETCH_FAILED = "fetch_failed"
    DECODE_ERROR = "decode_error"
    REJECTED = "rejected"
    TRANSPORT_ERROR = "transport_error"
    DELIVERED = "delivered"
    DELETE_FAILED = "delete_failed"
    ERROR = "error"

class PassSummary(BaseModel):
    keys_discovered: int = 0
    outcomes: dict[KeyOutcome, int] = Field(default_factory=dict)
    duration_seconds: float = 0.0

    def record(self, outcome: KeyOutcome) -> None:
        self.outcomes[outcome] = self.outcomes.get(outcome, 0) + 1

    def count(self, outcome: KeyOutcome) -> int:
        return self.outcomes.get(outcome, 0)
