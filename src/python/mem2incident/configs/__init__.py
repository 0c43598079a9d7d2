from .mem2incident_config import DEFAULT_CONFIG_FILE, Mem2IncidentConfig, load_config

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "Mem2IncidentConfig",
    "load_config",
]
