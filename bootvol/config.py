"""Volume step configuration: dataclass, YAML loading and client accessors."""

import os
from dataclasses import dataclass, field, fields

import httpx
import yaml

from bootvol.exceptions import ClientInitError
from bootvol.openstack import BlockStorageClient, ImageClient

TOKEN_ENV_VAR = "OS_AUTH_TOKEN"


@dataclass
class Config:
    """Everything the volume step reads from the build configuration.

    ``volume_size`` of 0 means "as large as the source image needs".
    """

    use_blockstorage_volume: bool = False
    volume_name: str = ""
    volume_type: str = ""
    volume_availability_zone: str = ""
    volume_size: int = 0
    image_metadata: dict[str, str] = field(default_factory=dict)
    block_storage_endpoint: str = ""
    image_endpoint: str = ""
    auth_token: str = field(default="", repr=False)
    volume_wait_timeout: float = 300
    volume_poll_interval: float = 1
    # Transport override for both service clients (proxies, custom TLS); not read from YAML
    transport: httpx.AsyncBaseTransport | None = field(default=None, repr=False, compare=False)

    @classmethod
    def from_dict(cls, d):
        """Build a validated Config from a plain dict (e.g. parsed YAML)."""
        d = dict(d or {})
        known = {f.name for f in fields(cls)} - {"transport"}
        unknown = sorted(set(d) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}. Accepted keys: {', '.join(sorted(known))}")

        if "image_metadata" in d:
            metadata = d["image_metadata"] or {}
            if not isinstance(metadata, dict):
                raise ValueError("image_metadata must be a mapping")
            bad = sorted(str(k) for k, v in metadata.items() if not isinstance(v, str))
            if bad:
                raise ValueError(f"image_metadata values must be strings: {', '.join(bad)}")
            d["image_metadata"] = {str(k): v for k, v in metadata.items()}

        config = cls(**d)
        config.validate()
        return config

    def validate(self):
        """Raise ValueError on values the step cannot work with."""
        if not isinstance(self.use_blockstorage_volume, bool):
            raise ValueError("use_blockstorage_volume must be true or false")
        if not isinstance(self.volume_size, int) or isinstance(self.volume_size, bool) or self.volume_size < 0:
            raise ValueError(f"volume_size must be a non-negative integer, got {self.volume_size!r}")
        for name in ("volume_wait_timeout", "volume_poll_interval"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
                raise ValueError(f"{name} must be a positive number, got {value!r}")

    def _resolve_token(self):
        token = self.auth_token or os.environ.get(TOKEN_ENV_VAR, "")
        if not token:
            raise ClientInitError(f"no auth token: set auth_token or {TOKEN_ENV_VAR}")
        return token

    def block_storage_client(self) -> BlockStorageClient:
        """Construct a Cinder v3 client for this config.

        Raises:
            ClientInitError: endpoint or token missing, or endpoint unusable.
        """
        if not self.block_storage_endpoint:
            raise ClientInitError("block_storage_endpoint is not set")
        token = self._resolve_token()
        try:
            return BlockStorageClient(self.block_storage_endpoint, token, transport=self.transport)
        except httpx.InvalidURL as e:
            raise ClientInitError(f"invalid block_storage_endpoint: {e}") from e

    def image_client(self) -> ImageClient:
        """Construct a Glance v2 client for this config.

        Raises:
            ClientInitError: endpoint or token missing, or endpoint unusable.
        """
        if not self.image_endpoint:
            raise ClientInitError("image_endpoint is not set")
        token = self._resolve_token()
        try:
            return ImageClient(self.image_endpoint, token, transport=self.transport)
        except httpx.InvalidURL as e:
            raise ClientInitError(f"invalid image_endpoint: {e}") from e


def load_config(config_path):
    """Load a Config from a YAML file."""
    if not os.path.isfile(config_path):
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Error parsing YAML config {config_path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config {config_path} must be a mapping, got {type(raw).__name__}")
    return Config.from_dict(raw)
