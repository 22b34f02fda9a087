"""Configuration management for estate-market."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from estate_market.exceptions import ConfigurationError

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass
class KafkaConfig:
    """Kafka producer configuration."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    batch_size: int = 16384
    linger_ms: int = 5
    compression: str = "snappy"
    retries: int = 3
    topic_prefix: str = "dev.market"

    def to_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "batch.size": self.batch_size,
            "linger.ms": self.linger_ms,
            "compression.type": self.compression,
            "retries": self.retries,
        }


@dataclass
class OutputConfig:
    """Output configuration."""

    json_output_dir: Path = field(default_factory=lambda: Path("output"))
    pretty_json: bool = False


@dataclass
class ScenarioConfig:
    """Configuration for a marketplace scenario run."""

    name: str = "marketplace"
    num_sellers: int = 10
    listings_per_seller: tuple[int, int] = (1, 3)
    num_buyers: int = 25
    offers_per_buyer: tuple[int, int] = (0, 3)
    publish_rate: float = 0.85
    viewing_rate: float = 0.40
    acceptance_rate: float = 0.30
    message_rate: float = 0.50


@dataclass
class MarketConfig:
    """Main configuration for estate-market."""

    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    scenario: ScenarioConfig | None = None
    seed: int | None = None
    log_level: str = "INFO"
    log_format: str = "standard"
    strict_status_transitions: bool = False

    @classmethod
    def from_env(cls) -> "MarketConfig":
        """Create config from environment variables."""
        kafka = KafkaConfig(
            bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            acks=os.getenv("KAFKA_ACKS", "all"),
            topic_prefix=os.getenv("TOPIC_PREFIX", "dev.market"),
        )

        output = OutputConfig(
            json_output_dir=Path(os.getenv("OUTPUT_DIR", "output")),
            pretty_json=_env_bool("PRETTY_JSON", False),
        )

        return cls(
            kafka=kafka,
            output=output,
            seed=_env_int("SEED"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
            strict_status_transitions=_env_bool("STRICT_STATUS_TRANSITIONS", False),
        )


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}")


def _env_int(name: str) -> int | None:
    raw = os.getenv(name)
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc
