"""Tests for bootvol.config: YAML loading, validation, client accessors."""

import pytest
import yaml

from bootvol.config import TOKEN_ENV_VAR, Config, load_config
from bootvol.exceptions import ClientInitError
from bootvol.openstack import BlockStorageClient, ImageClient


def _write(tmp_path, data):
    path = tmp_path / "config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return str(path)


# ── load_config ───────────────────────────────────────────────────


def test_load_config_full(tmp_path):
    path = _write(
        tmp_path,
        {
            "use_blockstorage_volume": True,
            "volume_name": "build-vol",
            "volume_type": "ssd",
            "volume_availability_zone": "nova",
            "volume_size": 40,
            "image_metadata": {"os_distro": "ubuntu", "hw_disk_bus": "scsi"},
            "block_storage_endpoint": "https://cinder.test/v3/p",
            "image_endpoint": "https://glance.test",
            "volume_wait_timeout": 600,
            "volume_poll_interval": 2,
        },
    )
    config = load_config(path)
    assert config.use_blockstorage_volume is True
    assert config.volume_name == "build-vol"
    assert config.volume_size == 40
    assert config.image_metadata == {"os_distro": "ubuntu", "hw_disk_bus": "scsi"}
    assert config.volume_wait_timeout == 600
    assert config.transport is None


def test_load_config_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    config = load_config(str(path))
    assert config == Config()
    assert config.use_blockstorage_volume is False
    assert config.volume_size == 0
    assert config.volume_wait_timeout == 300


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError, match="Config file not found"):
        load_config(str(tmp_path / "nope.yaml"))


def test_load_config_bad_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("volume_name: [unclosed\n")
    with pytest.raises(ValueError, match="Error parsing YAML"):
        load_config(str(path))


def test_load_config_not_a_mapping(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ValueError, match="must be a mapping"):
        load_config(str(path))


# ── validation ────────────────────────────────────────────────────


def test_unknown_key_rejected():
    with pytest.raises(ValueError, match="Unknown config keys: volume_sise"):
        Config.from_dict({"volume_sise": 10})


def test_transport_not_accepted_from_dict():
    with pytest.raises(ValueError, match="Unknown config keys: transport"):
        Config.from_dict({"transport": "x"})


def test_negative_size_rejected():
    with pytest.raises(ValueError, match="volume_size must be a non-negative integer"):
        Config.from_dict({"volume_size": -1})


def test_non_integer_size_rejected():
    with pytest.raises(ValueError, match="volume_size"):
        Config.from_dict({"volume_size": 1.5})


def test_non_bool_flag_rejected():
    with pytest.raises(ValueError, match="use_blockstorage_volume"):
        Config.from_dict({"use_blockstorage_volume": "yes"})


def test_non_positive_timeout_rejected():
    with pytest.raises(ValueError, match="volume_wait_timeout must be a positive number"):
        Config.from_dict({"volume_wait_timeout": 0})


def test_bad_poll_interval_rejected():
    with pytest.raises(ValueError, match="volume_poll_interval"):
        Config.from_dict({"volume_poll_interval": "fast"})


def test_metadata_values_must_be_strings():
    with pytest.raises(ValueError, match="image_metadata values must be strings: min_ram"):
        Config.from_dict({"image_metadata": {"os_distro": "ubuntu", "min_ram": 512}})


def test_metadata_must_be_mapping():
    with pytest.raises(ValueError, match="image_metadata must be a mapping"):
        Config.from_dict({"image_metadata": ["a"]})


def test_null_metadata_becomes_empty():
    assert Config.from_dict({"image_metadata": None}).image_metadata == {}


def test_auth_token_hidden_from_repr():
    config = Config(auth_token="super-secret-token")
    assert "super-secret-token" not in repr(config)


# ── client accessors ──────────────────────────────────────────────


async def test_block_storage_client_built(monkeypatch):
    monkeypatch.delenv(TOKEN_ENV_VAR, raising=False)
    config = Config(block_storage_endpoint="https://cinder.test/v3/p/", auth_token="tok")
    client = config.block_storage_client()
    assert isinstance(client, BlockStorageClient)
    assert client.endpoint == "https://cinder.test/v3/p"
    await client.aclose()


async def test_image_client_uses_env_token(monkeypatch):
    monkeypatch.setenv(TOKEN_ENV_VAR, "env-token-123")
    config = Config(image_endpoint="https://glance.test")
    client = config.image_client()
    assert isinstance(client, ImageClient)
    await client.aclose()


def test_block_storage_client_missing_endpoint():
    with pytest.raises(ClientInitError, match="block_storage_endpoint is not set"):
        Config(auth_token="tok").block_storage_client()


def test_image_client_missing_endpoint():
    with pytest.raises(ClientInitError, match="image_endpoint is not set"):
        Config(auth_token="tok").image_client()


def test_client_missing_token(monkeypatch):
    monkeypatch.delenv(TOKEN_ENV_VAR, raising=False)
    config = Config(block_storage_endpoint="https://cinder.test/v3/p")
    with pytest.raises(ClientInitError, match="no auth token"):
        config.block_storage_client()
