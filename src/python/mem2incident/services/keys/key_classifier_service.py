import re
from injector import inject, singleton
from mem2incident.models import CreateIncidentKey, KeyKind, LinkIncidentKey, UnmatchedKey

_UUID = r"[a-fA-F0-9\-]+"

# rbincident[:<domain-uuid>]:incident:<incident-uuid>
CREATE_INCIDENT_PATTERN = re.compile(rf"rbincident(?::(?P<domain>{_UUID}))?:incident:(?P<incident>{_UUID})")
# rbincident_<domain-uuid>_incident_<incident-uuid> (legacy producers)
LEGACY_CREATE_INCIDENT_PATTERN = re.compile(rf"rbincident_(?P<domain>{_UUID})_incident_(?P<incident>{_UUID})")
# rbincident:relation:<parent-uuid>
LINK_INCIDENT_PATTERN = re.compile(rf"rbincident:relation:{_UUID}")

UNMATCHED = UnmatchedKey()

@singleton
class KeyClassifierService:

    @inject
    def __init__(self):
        pass

    def classify(self, key: str) -> KeyKind:
        """
        Map a cache key to the kind of record it holds.

        Pure and total: every string maps to exactly one variant, and
        keys that follow neither naming convention are `UnmatchedKey`.
        """
        match = CREATE_INCIDENT_PATTERN.fullmatch(key) or LEGACY_CREATE_INCIDENT_PATTERN.fullmatch(key)
        if match is not None:
            return CreateIncidentKey(
                incident_uuid=match.group("incident"),
                domain_uuid=match.group("domain"),
            )

        if LINK_INCIDENT_PATTERN.fullmatch(key) is not None:
            return LinkIncidentKey(parent_uuid=key.split(":")[2])

        return UNMATCHED
