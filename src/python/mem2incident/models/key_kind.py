from typing import Literal, Optional, Union
from pydantic import BaseModel, ConfigDict

class CreateIncidentKey(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["create_incident"] = "create_incident"
    incident_uuid: str
    domain_uuid: Optional[str] = None

class LinkIncidentKey(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["link_incident"] = "link_incident"
    parent_uuid: str

class UnmatchedKey(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["unmatched"] = "unmatched"

KeyKind = Union[CreateIncidentKey, LinkIncidentKey, UnmatchedKey]
