"""Kafka sink for streaming listing and vote events to Kafka topics."""

import json
import logging
from dataclasses import dataclass, is_dataclass, replace
from typing import Any

from confluent_kafka import Producer

from estate_map.config import KafkaConfig
from estate_map.exceptions import ConfigurationError, SinkError
from estate_map.models import Event
from estate_map.sinks.serialization import to_dict

logger = logging.getLogger(__name__)


@dataclass
class ProducerConfig:
    """Kafka producer configuration."""

    bootstrap_servers: str
    acks: str = "all"  # "0", "1", "all"
    batch_size: int = 16384  # bytes
    linger_ms: int = 5  # ms to wait for batching
    compression: str = "snappy"  # none, gzip, snappy, lz4
    retries: int = 3

    @classmethod
    def from_kafka_config(cls, config: KafkaConfig) -> "ProducerConfig":
        return cls(
            bootstrap_servers=config.bootstrap_servers,
            acks=config.acks,
            batch_size=config.batch_size,
            linger_ms=config.linger_ms,
            compression=config.compression,
            retries=config.retries,
        )


# Configuration presets
RELIABLE = ProducerConfig(
    bootstrap_servers="localhost:9092",
    acks="all",
    batch_size=16384,
    linger_ms=5,
)

EVENT_BY_EVENT = ProducerConfig(
    bootstrap_servers="localhost:9092",
    acks="all",
    batch_size=1,
    linger_ms=0,
)

PRESETS = {
    "reliable": RELIABLE,
    "event-by-event": EVENT_BY_EVENT,
}


def preset(name: str, bootstrap_servers: str) -> ProducerConfig:
    """Return the named preset pointed at ``bootstrap_servers``."""
    try:
        base = PRESETS[name]
    except KeyError:
        allowed = ", ".join(PRESETS)
        raise ConfigurationError(f"Unknown producer preset {name!r}; expected one of: {allowed}") from None
    return replace(base, bootstrap_servers=bootstrap_servers)


@dataclass
class ProducerStats:
    """Track producer delivery statistics."""

    sent: int = 0
    delivered: int = 0
    failed: int = 0

    @property
    def success_rate(self) -> float:
        """Calculate success rate."""
        total = self.delivered + self.failed
        return self.delivered / total if total > 0 else 0.0


class KafkaSink:
    """Output listings and events to Kafka topics.

    Events are keyed by their subject (the property id), so every change to
    one listing lands on the same partition in commit order.
    """

    # Topic to key field mapping for plain records
    KEY_FIELDS = {
        "properties": "property_id",
        "users": "user_id",
    }

    def __init__(self, config: ProducerConfig | KafkaConfig | str) -> None:
        """Initialize Kafka sink.

        Parameters
        ----------
        config : ProducerConfig | KafkaConfig | str
            Producer configuration, app Kafka config or bootstrap servers string.
        """
        if isinstance(config, str):
            config = ProducerConfig(bootstrap_servers=config)
        elif isinstance(config, KafkaConfig):
            config = ProducerConfig.from_kafka_config(config)

        self.config = config
        self.producer = self._create_producer()
        self.stats = ProducerStats()

    def _create_producer(self) -> Producer:
        """Create Kafka producer with configuration."""
        return Producer(
            {
                "bootstrap.servers": self.config.bootstrap_servers,
                "acks": self.config.acks,
                "retries": self.config.retries,
                "linger.ms": self.config.linger_ms,
                "batch.size": self.config.batch_size,
                "compression.type": self.config.compression,
            }
        )

    def _delivery_callback(self, err: Any, msg: Any) -> None:
        """Handle delivery reports."""
        if err:
            self.stats.failed += 1
            logger.error("Delivery failed: %s", err)
        else:
            self.stats.delivered += 1
            logger.debug("Delivered to %s[%d]@%d", msg.topic(), msg.partition(), msg.offset())

    def _get_key(self, topic: str, record: Any) -> str | None:
        """Extract message key from record based on topic."""
        if isinstance(record, Event):
            return record.subject

        key_field = self.KEY_FIELDS.get(topic.split(".")[-1])
        if not key_field:
            return None

        if is_dataclass(record):
            return getattr(record, key_field, None)
        elif isinstance(record, dict):
            return record.get(key_field)
        return None

    def send(self, topic: str, record: Any, key: str | None = None) -> None:
        """Send a single record to Kafka topic."""
        value = json.dumps(to_dict(record), ensure_ascii=False, default=str).encode("utf-8")

        if key is None:
            key = self._get_key(topic, record)

        try:
            self.producer.produce(
                topic=topic,
                key=key.encode("utf-8") if key else None,
                value=value,
                callback=self._delivery_callback,
            )
        except BufferError as exc:
            raise SinkError(f"Kafka producer queue is full for {topic}") from exc
        self.stats.sent += 1
        self.producer.poll(0)

    def publish(self, topic: str, event: Event) -> None:
        """Send one event keyed by its subject."""
        self.send(topic, event, key=event.subject)

    def write_batch(self, topic: str, records: list[Any]) -> None:
        """Write a batch of records to a Kafka topic."""
        logger.info("Writing batch to %s: %d records", topic, len(records))

        for record in records:
            self.send(topic, record)

        self.flush()
        logger.info("Batch complete: sent=%d, delivered=%d, failed=%d",
                    self.stats.sent, self.stats.delivered, self.stats.failed)

    def flush(self, timeout: float = 30.0) -> None:
        """Flush pending messages."""
        self.producer.flush(timeout)

    def close(self) -> None:
        """Flush and close the producer."""
        self.flush()
        logger.info(
            "Kafka sink closed: sent=%d, delivered=%d, failed=%d",
            self.stats.sent,
            self.stats.delivered,
            self.stats.failed,
        )
