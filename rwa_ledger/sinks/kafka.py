"""Kafka sink for streaming ledger events to indexers.

Each event type has its own topic under a common prefix
(``dev.rwa.purchase-failed``). Messages are keyed by asset id, so every
event for one property lands on the same partition in commit order.
"""

import logging
import re
from dataclasses import dataclass, replace
from typing import Any

from confluent_kafka import KafkaException, Producer
from confluent_kafka.admin import AdminClient, NewTopic

from rwa_ledger.config import KafkaConfig
from rwa_ledger.exceptions import SinkError
from rwa_ledger.models.base import Event
from rwa_ledger.models.enums import EventType
from rwa_ledger.sinks.serialization import encode_event

logger = logging.getLogger(__name__)

# Settlement events are rare and must not be lost; send each one immediately
# and wait for every in-sync replica.
SETTLEMENT = KafkaConfig(acks="all", batch_size=1, linger_ms=0, retries=5)

# Small batches for bulk simulations.
BATCHED = KafkaConfig(acks="all", batch_size=16384, linger_ms=5)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


@dataclass
class ProducerStats:
    """Delivery counters for one sink."""

    sent: int = 0
    delivered: int = 0
    failed: int = 0

    @property
    def in_flight(self) -> int:
        return max(self.sent - self.delivered - self.failed, 0)

    @property
    def success_rate(self) -> float:
        total = self.delivered + self.failed
        return self.delivered / total if total > 0 else 0.0


def topic_for(prefix: str, event_type: str) -> str:
    """Map an event type to its topic.

    ``PurchaseFailed`` under ``dev.rwa`` becomes ``dev.rwa.purchase-failed``;
    acronyms stay whole, so ``TokenURIUpdated`` becomes ``token-uri-updated``.
    """
    kebab = _CAMEL_BOUNDARY.sub("-", event_type).lower()
    return f"{prefix}.{kebab}" if prefix else kebab


def ensure_topics(
    config: KafkaConfig,
    partitions: int = 3,
    replication_factor: int = 1,
    retention_hours: int | None = None,
) -> list[str]:
    """Create the topic of every ledger event type that does not exist yet.

    Returns the names of the topics created. A topic that fails to create
    is logged and left out; the producer reports it again on first use.
    """
    admin = AdminClient({"bootstrap.servers": config.bootstrap_servers})
    topic_config = {}
    if retention_hours is not None:
        topic_config["retention.ms"] = str(retention_hours * 3600 * 1000)

    wanted = [topic_for(config.topic_prefix, event_type.value) for event_type in EventType]
    existing = admin.list_topics(timeout=10).topics
    missing = [
        NewTopic(name, num_partitions=partitions, replication_factor=replication_factor, config=topic_config)
        for name in wanted
        if name not in existing
    ]
    if not missing:
        logger.info("All %d ledger topics already exist", len(wanted))
        return []

    created = []
    for name, future in admin.create_topics(missing).items():
        try:
            future.result()
        except KafkaException as e:
            logger.warning("Failed to create topic %s: %s", name, e)
            continue
        logger.info("Created topic: %s", name)
        created.append(name)
    return created


class KafkaSink:
    """Publish ledger events to Kafka."""

    def __init__(self, config: KafkaConfig | str) -> None:
        """Create the producer.

        Parameters
        ----------
        config : KafkaConfig | str
            Full producer settings, or just the bootstrap servers.
        """
        if isinstance(config, str):
            config = replace(BATCHED, bootstrap_servers=config)

        self.config = config
        self.stats = ProducerStats()
        self.producer = Producer(config.to_dict())

    def _on_delivery(self, err: Any, msg: Any) -> None:
        if err:
            self.stats.failed += 1
            logger.error("Delivery failed: %s", err)
        else:
            self.stats.delivered += 1
            logger.debug("Delivered to %s[%d]@%d", msg.topic(), msg.partition(), msg.offset())

    def write_event(self, event: Event) -> None:
        """Queue one event for delivery.

        Raises
        ------
        SinkError
            The local producer queue is full or the producer rejected the
            message. Broker-side failures arrive later through the delivery
            callback and only show up in ``stats``.
        """
        topic = topic_for(self.config.topic_prefix, event.event_type)
        try:
            self.producer.produce(
                topic=topic,
                key=event.key,
                value=encode_event(event),
                on_delivery=self._on_delivery,
            )
        except (BufferError, KafkaException) as e:
            self.stats.failed += 1
            raise SinkError(f"Failed to produce {event.event_type} to {topic}: {e}") from e
        self.stats.sent += 1
        # Serve delivery callbacks of earlier messages
        try:
            self.producer.poll(0)
        except KafkaException as e:
            raise SinkError(f"Failed to poll after producing {event.event_type}: {e}") from e

    def flush(self, timeout: float = 30.0) -> int:
        """Wait for queued messages; return how many are still undelivered."""
        return self.producer.flush(timeout)

    def close(self) -> None:
        remaining = self.flush()
        if remaining:
            logger.warning("Kafka sink closed with %d undelivered events", remaining)
        logger.info(
            "Kafka sink closed: sent=%d, delivered=%d, failed=%d",
            self.stats.sent,
            self.stats.delivered,
            self.stats.failed,
        )
