from .incidents_api_client import IncidentsApiClient

__all__ = [
    "IncidentsApiClient",
]
