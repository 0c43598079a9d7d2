"""Tests for YAML configuration loading."""

import pytest
from pydantic import ValidationError

from mem2incident.configs import Mem2IncidentConfig, load_config
from mem2incident.exceptions import ConfigError

VALID = """
memcached_servers:
  - "10.0.0.1:11211"
  - "10.0.0.2"
api_endpoint: "https://webui.example/api/v1/incidents/"
auth_token: "secret"
loop_interval: 30
"""


def write(tmp_path, content: str):
    path = tmp_path / "config.yml"
    path.write_text(content, encoding="utf-8")
    return path


def test_load_valid_config(tmp_path):
    config = load_config(write(tmp_path, VALID))
    assert config.memcached_servers == ["10.0.0.1:11211", "10.0.0.2"]
    assert config.api_endpoint == "https://webui.example/api/v1/incidents"
    assert config.auth_token == "secret"
    assert config.loop_interval == 30
    assert config.verify_tls is True
    assert config.metrics_port is None


def test_defaults_apply(tmp_path):
    config = load_config(write(tmp_path, "memcached_servers: [cache]\napi_endpoint: http://api\n"))
    assert config.loop_interval == 60
    assert config.auth_token == ""
    assert config.discovery_workers == 1
    assert config.api_timeout == 10.0


def test_insecure_skip_verify_disables_tls_verification(tmp_path):
    config = load_config(write(tmp_path, VALID + "insecure_skip_verify: true\n"))
    assert config.verify_tls is False


def test_unknown_keys_are_ignored(tmp_path):
    config = load_config(write(tmp_path, VALID + "legacy_option: 1\n"))
    assert not hasattr(config, "legacy_option")


def test_missing_file_raises_config_error(tmp_path):
    with pytest.raises(ConfigError) as exc:
        load_config(tmp_path / "absent.yml")
    assert "absent.yml" in exc.value.message


def test_malformed_yaml_raises_config_error(tmp_path):
    with pytest.raises(ConfigError):
        load_config(write(tmp_path, "memcached_servers: [unclosed\n"))


def test_non_mapping_raises_config_error(tmp_path):
    with pytest.raises(ConfigError):
        load_config(write(tmp_path, "- just\n- a list\n"))


@pytest.mark.parametrize(
    "content",
    [
        "api_endpoint: http://api\n",
        "memcached_servers: []\napi_endpoint: http://api\n",
        "memcached_servers: ['  ']\napi_endpoint: http://api\n",
        "memcached_servers: [cache]\n",
        "memcached_servers: [cache]\napi_endpoint: http://api\nloop_interval: 0\n",
        "memcached_servers: ['cache:notaport']\napi_endpoint: http://api\n",
        "memcached_servers: [cache]\napi_endpoint: '   '\n",
        "memcached_servers: [cache]\napi_endpoint: '/'\n",
    ],
)
def test_invalid_settings_raise_config_error(tmp_path, content):
    with pytest.raises(ConfigError):
        load_config(write(tmp_path, content))


def test_config_is_immutable(config):
    with pytest.raises(ValidationError):
        config.loop_interval = 5
    assert isinstance(config, Mem2IncidentConfig)
