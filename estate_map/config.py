"""Configuration management for estate-map."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from estate_map.exceptions import ConfigurationError


@dataclass
class ReliabilityConfig:
    """Tunables of the price-reliability score."""

    initial: float = 100.0
    step: float = 2.0
    elimination_threshold: float = 2.0

    def __post_init__(self) -> None:
        if not 0 <= self.initial <= 100:
            raise ConfigurationError(f"Initial reliability {self.initial} outside [0, 100]")
        if self.step <= 0:
            raise ConfigurationError(f"Reliability step must be positive, got {self.step}")
        if not 0 <= self.elimination_threshold < 100:
            raise ConfigurationError(
                f"Elimination threshold {self.elimination_threshold} outside [0, 100)"
            )


@dataclass
class StoreConfig:
    """Document store transaction policy."""

    max_transaction_retries: int = 5

    def __post_init__(self) -> None:
        if self.max_transaction_retries < 0:
            raise ConfigurationError("max_transaction_retries cannot be negative")


@dataclass
class KafkaConfig:
    """Kafka producer configuration."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    batch_size: int = 16384
    linger_ms: int = 5
    compression: str = "snappy"
    retries: int = 3

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
    topic_prefix: str = "estate"


@dataclass
class EstateMapConfig:
    """Main configuration for estate-map."""

    reliability: ReliabilityConfig = field(default_factory=ReliabilityConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    seed: int | None = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "EstateMapConfig":
        """Create config from environment variables."""
        import os

        try:
            reliability = ReliabilityConfig(
                step=float(os.getenv("RELIABILITY_STEP", "2.0")),
                elimination_threshold=float(os.getenv("ELIMINATION_THRESHOLD", "2.0")),
            )
            store = StoreConfig(
                max_transaction_retries=int(os.getenv("MAX_TRANSACTION_RETRIES", "5")),
            )
            seed = int(os.getenv("SEED")) if os.getenv("SEED") else None
        except ValueError as exc:
            raise ConfigurationError(f"Invalid numeric setting: {exc}") from exc

        kafka = KafkaConfig(
            bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            acks=os.getenv("KAFKA_ACKS", "all"),
        )

        output = OutputConfig(
            json_output_dir=Path(os.getenv("OUTPUT_DIR", "output")),
            pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
            topic_prefix=os.getenv("TOPIC_PREFIX", "estate"),
        )

        return cls(
            reliability=reliability,
            store=store,
            kafka=kafka,
            output=output,
            seed=seed,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
