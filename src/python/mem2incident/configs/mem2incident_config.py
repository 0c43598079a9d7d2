"""Configuration model and loader for the mem2incident service."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from memcached_cluster import NodeAddress
from mem2incident.exceptions import ConfigError

DEFAULT_CONFIG_FILE = Path("config.yml")

logger = logging.getLogger(__name__)


class Mem2IncidentConfig(BaseModel):
    """Immutable process-wide settings, loaded once at startup."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    memcached_servers: List[str] = Field(..., min_length=1, description="Memcached nodes as host:port.")
    api_endpoint: str = Field(..., min_length=1, description="Incidents API endpoint; links go to <endpoint>/link.")
    loop_interval: int = Field(default=60, ge=1, description="Seconds to sleep between reconciliation passes.")
    insecure_skip_verify: bool = Field(default=False, description="Disable TLS certificate verification.")
    auth_token: str = Field(default="", description="Token injected into every delivered payload.")
    cache_connect_timeout: float = Field(default=2.0, gt=0, description="Memcached connect timeout (seconds).")
    cache_timeout: float = Field(default=5.0, gt=0, description="Memcached read/write timeout (seconds).")
    api_timeout: float = Field(default=10.0, gt=0, description="Incidents API request timeout (seconds).")
    discovery_workers: int = Field(default=1, ge=1, description="Threads used to enumerate memcached nodes.")
    metrics_port: Optional[int] = Field(
        default=None, ge=1, le=65535, description="Port for the Prometheus endpoint; disabled when unset."
    )

    @field_validator("memcached_servers")
    @classmethod
    def _validate_servers(cls, value: List[str]) -> List[str]:
        servers = [str(server).strip() for server in value if str(server).strip()]
        if not servers:
            raise ValueError("at least one memcached server is required")
        for server in servers:
            NodeAddress.parse(server)
        return servers

    @field_validator("api_endpoint")
    @classmethod
    def _strip_endpoint(cls, value: str) -> str:
        endpoint = value.strip().rstrip("/")
        if not endpoint:
            raise ValueError("api_endpoint must not be blank")
        return endpoint

    @property
    def verify_tls(self) -> bool:
        return not self.insecure_skip_verify


def load_config(path: Optional[Path] = None) -> Mem2IncidentConfig:
    """Read and validate the YAML configuration file.

    Raises:
        ConfigError: If the file is unreadable, is not a YAML mapping,
            or fails validation.
    """

    config_path = Path(path or DEFAULT_CONFIG_FILE).expanduser()
    try:
        raw: Any = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(str(config_path), f"failed to read config file: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(str(config_path), f"failed to parse config file: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(str(config_path), "config file must contain a YAML mapping")

    try:
        config = Mem2IncidentConfig.model_validate(raw)
    except (ValidationError, ValueError) as exc:
        raise ConfigError(str(config_path), str(exc)) from exc

    logger.info(f"Config loaded from {config_path} ({len(config.memcached_servers)} memcached server(s))")
    return config
