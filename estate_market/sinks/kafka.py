"""Kafka sink for publishing marketplace records and events."""

import json
import logging
from dataclasses import dataclass
from typing import Any

from confluent_kafka import KafkaException, Producer

from estate_market.config import KafkaConfig
from estate_market.exceptions import SinkError
from estate_market.sinks.serialization import to_dict

logger = logging.getLogger(__name__)


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
    """Output records to Kafka topics, one topic per entity type.

    Records are keyed so that everything about one listing lands on the
    same partition.
    """

    # Entity type to key field mapping
    KEY_FIELDS = {
        "properties": "property_id",
        "offers": "property_id",
        "viewings": "property_id",
        "events": "subject",
        "buyers": "user_id",
        "sellers": "user_id",
        "messages": "property_id",
    }

    def __init__(self, config: KafkaConfig | str) -> None:
        """Initialize Kafka sink.

        Parameters
        ----------
        config : KafkaConfig | str
            Kafka configuration or bootstrap servers string.
        """
        if isinstance(config, str):
            config = KafkaConfig(bootstrap_servers=config)

        self.config = config
        self.producer = Producer(config.to_dict())
        self.stats = ProducerStats()

    def topic_for(self, entity_type: str) -> str:
        """``offers`` -> ``dev.market.offers``."""
        return f"{self.config.topic_prefix}.{entity_type}"

    def _delivery_callback(self, err: Any, msg: Any) -> None:
        """Handle delivery reports."""
        if err:
            self.stats.failed += 1
            logger.error("Delivery failed: %s", err)
        else:
            self.stats.delivered += 1
            logger.debug("Delivered to %s[%d]@%d", msg.topic(), msg.partition(), msg.offset())

    def _get_key(self, entity_type: str, data: dict) -> str | None:
        key_field = self.KEY_FIELDS.get(entity_type)
        if not key_field:
            return None
        if key_field == "user_id":
            return (data.get("profile") or {}).get("user_id")
        return data.get(key_field)

    def send(self, entity_type: str, record: Any, key: str | None = None) -> None:
        """Send a single record to the entity type's topic."""
        data = to_dict(record)
        value = json.dumps(data, ensure_ascii=False, default=str).encode("utf-8")
        if key is None:
            key = self._get_key(entity_type, data)

        try:
            self.producer.produce(
                topic=self.topic_for(entity_type),
                key=key.encode("utf-8") if key else None,
                value=value,
                callback=self._delivery_callback,
            )
        except (BufferError, KafkaException) as exc:
            raise SinkError(f"Failed to produce {entity_type} record: {exc}") from exc
        self.stats.sent += 1
        self.producer.poll(0)

    def write_batch(self, entity_type: str, records: list[Any]) -> None:
        """Write a batch of records to the entity type's topic."""
        logger.info("Writing batch to %s: %d records", self.topic_for(entity_type), len(records))

        for record in records:
            self.send(entity_type, record)

        self.flush()
        logger.info(
            "Batch complete: sent=%d, delivered=%d, failed=%d",
            self.stats.sent,
            self.stats.delivered,
            self.stats.failed,
        )

    def flush(self, timeout: float = 30.0) -> None:
        """Flush pending messages."""
        remaining = self.producer.flush(timeout)
        if remaining:
            logger.warning("%d messages still queued after flush", remaining)

    def close(self) -> None:
        """Flush and close the producer."""
        self.flush()
        logger.info(
            "Kafka sink closed: sent=%d, delivered=%d, failed=%d",
            self.stats.sent,
            self.stats.delivered,
            self.stats.failed,
        )
