"""Configuration models using Pydantic for validation."""
from typing import Any, Dict, List, Literal, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator
import os

from readmock.series import Series


class ServerConfig(BaseModel):
    """HTTP listener configuration."""
    host: str = "127.0.0.1"
    port: int = 0  # 0 binds an ephemeral port
    read_path: str = "/read"
    startup_timeout_s: float = 5.0

    @field_validator('read_path')
    @classmethod
    def validate_read_path(cls, v):
        if not v.startswith("/"):
            raise ValueError(f"read_path must start with '/', got {v!r}")
        return v


class ProtocolConfig(BaseModel):
    """Remote-read transport contract enforced on every request."""
    compression: str = "snappy"
    content_type: str = "application/x-protobuf"
    version_header: str = "X-Prometheus-Remote-Read-Version"
    version_prefix: str = "0.1."

    @field_validator('version_prefix', 'compression', 'content_type', 'version_header')
    @classmethod
    def validate_not_empty(cls, v):
        if not v:
            raise ValueError("protocol fields must not be empty")
        return v


class SampleSpec(BaseModel):
    """A single fixture sample."""
    timestamp: int
    value: float


class SeriesSpec(BaseModel):
    """Fixture series: labels plus timestamp-ordered samples."""
    labels: Dict[str, str] = Field(default_factory=dict)
    samples: List[SampleSpec] = Field(default_factory=list)

    @field_validator('samples', mode='before')
    @classmethod
    def coerce_pairs(cls, v):
        """Accept ``[timestamp, value]`` pairs alongside mappings."""
        if v is None:
            return []
        coerced = []
        for item in v:
            if isinstance(item, (list, tuple)):
                if len(item) != 2:
                    raise ValueError(f"sample pair must be [timestamp, value], got {item!r}")
                coerced.append({"timestamp": item[0], "value": item[1]})
            else:
                coerced.append(item)
        return coerced

    @field_validator('samples')
    @classmethod
    def validate_ordered(cls, v):
        for prev, cur in zip(v, v[1:]):
            if cur.timestamp < prev.timestamp:
                raise ValueError(
                    f"samples must be ordered by timestamp: {cur.timestamp} follows {prev.timestamp}"
                )
        return v

    def to_series(self) -> Series:
        return Series.create(self.labels, [(s.timestamp, s.value) for s in self.samples])


class GlobalConfig(BaseModel):
    """Global configuration settings."""
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "text"


class Config(BaseModel):
    """Root configuration model."""
    model_config = ConfigDict(populate_by_name=True)

    global_: GlobalConfig = Field(default_factory=GlobalConfig, alias="global")
    server: ServerConfig = Field(default_factory=ServerConfig)
    protocol: ProtocolConfig = Field(default_factory=ProtocolConfig)
    series: List[SeriesSpec] = Field(default_factory=list)

    def dataset(self) -> Tuple[Series, ...]:
        """Immutable snapshot of the configured fixture series."""
        return tuple(spec.to_series() for spec in self.series)


def _read_yaml(path: str) -> Dict[str, Any]:
    import yaml

    if not os.path.exists(path):
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, 'r') as f:
        raw = yaml.safe_load(f)

    return raw or {}


def load_config(config_path: str) -> Config:
    """Load and validate configuration from YAML file."""
    raw_config = _read_yaml(config_path)

    # Apply environment variable overrides
    if env_log_level := os.getenv('LOG_LEVEL'):
        raw_config.setdefault('global', {})['log_level'] = env_log_level

    if env_port := os.getenv('READMOCK_PORT'):
        raw_config.setdefault('server', {})['port'] = env_port

    try:
        return Config(**raw_config)
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}")


def load_dataset(dataset_path: str) -> Tuple[Series, ...]:
    """Load only the ``series`` section of a YAML fixture file."""
    raw = _read_yaml(dataset_path)
    specs: Union[List[Any], Any] = raw.get('series', []) if isinstance(raw, dict) else raw

    try:
        config = Config(series=specs)
    except Exception as e:
        raise ValueError(f"Dataset validation failed: {e}")

    return config.dataset()
