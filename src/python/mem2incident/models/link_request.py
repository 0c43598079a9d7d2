from pydantic import BaseModel

class LinkRequest(BaseModel):
    parent_incident_uuid: str
    child_incident_uuid: str
    auth_token: str
