import json
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict

class ErrorResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    errors: Any = None

    @staticmethod
    def parse(body: bytes) -> Optional["ErrorResponse"]:
        # Only JSON objects carry an errors field; anything else is opaque
        try:
            data = json.loads(body)
        except (ValueError, UnicodeDecodeError):
            return None
        if not isinstance(data, dict):
            return None
        return ErrorResponse.model_validate(data)
