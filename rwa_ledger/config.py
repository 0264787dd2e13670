"""Configuration for rwa-ledger.

Settings are plain dataclasses with working defaults. ``RwaLedgerConfig.from_env``
builds them from environment variables:

=========================  =================================  ==================
Variable                   Setting                            Default
=========================  =================================  ==================
RWA_PLATFORM_OWNER         ledger.platform_owner              platform-owner
RWA_EVENT_SOURCE           ledger.source                      rwa-ledger
RWA_EVENT_SINKS            ledger.sinks (comma separated)     memory
TOPIC_PREFIX               kafka.topic_prefix                 dev.rwa
KAFKA_BOOTSTRAP_SERVERS    kafka.bootstrap_servers            localhost:9092
KAFKA_ACKS                 kafka.acks                         all
OUTPUT_DIR                 output.audit_log_dir               output
AUDIT_LOG_NAME             output.audit_log_name              ledger_events.jsonl
SEED                       seed                               unset
LOG_LEVEL                  log_level                          INFO
LOG_FORMAT                 log_format                         standard
=========================  =================================  ==================
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from rwa_ledger.exceptions import ConfigurationError

SINK_NAMES = ("memory", "jsonl", "kafka")
LOG_FORMATS = ("standard", "json")


@dataclass
class KafkaConfig:
    """Kafka producer settings and the topic namespace for ledger events."""

    bootstrap_servers: str = "localhost:9092"
    topic_prefix: str = "dev.rwa"
    acks: str = "all"
    batch_size: int = 16384
    linger_ms: int = 5
    compression: str = "snappy"
    retries: int = 3

    def to_dict(self) -> dict[str, Any]:
        """Producer settings in confluent-kafka's dotted-key form."""
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
    audit_log_dir: Path = field(default_factory=lambda: Path("output"))
    audit_log_name: str = "ledger_events.jsonl"

    @property
    def audit_log_path(self) -> Path:
        return self.audit_log_dir / self.audit_log_name


@dataclass
class LedgerConfig:
    """Who owns the platform and where committed events go."""

    platform_owner: str = "platform-owner"
    source: str = "rwa-ledger"
    sinks: list[str] = field(default_factory=lambda: ["memory"])

    def __post_init__(self) -> None:
        if not self.platform_owner:
            raise ConfigurationError("platform_owner must be a non-empty identity")
        unknown = [name for name in self.sinks if name not in SINK_NAMES]
        if unknown:
            raise ConfigurationError(
                f"Unknown event sinks {unknown}; expected any of {list(SINK_NAMES)}"
            )


def _env_list(name: str, default: str) -> list[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


def _env_int(name: str) -> int | None:
    raw = os.getenv(name)
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


@dataclass
class RwaLedgerConfig:
    """Top-level configuration handed to ``RwaMarketplace.from_config``."""

    ledger: LedgerConfig = field(default_factory=LedgerConfig)
    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    seed: int | None = None
    log_level: str = "INFO"
    log_format: str = "standard"

    def __post_init__(self) -> None:
        if self.log_format not in LOG_FORMATS:
            raise ConfigurationError(
                f"Unknown log format {self.log_format!r}; expected one of {list(LOG_FORMATS)}"
            )

    @classmethod
    def from_env(cls) -> "RwaLedgerConfig":
        """Create config from environment variables.

        Raises
        ------
        ConfigurationError
            A variable holds a value the ledger cannot use.
        """
        ledger = LedgerConfig(
            platform_owner=os.getenv("RWA_PLATFORM_OWNER", "platform-owner"),
            source=os.getenv("RWA_EVENT_SOURCE", "rwa-ledger"),
            sinks=_env_list("RWA_EVENT_SINKS", "memory"),
        )
        kafka = KafkaConfig(
            bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            topic_prefix=os.getenv("TOPIC_PREFIX", "dev.rwa"),
            acks=os.getenv("KAFKA_ACKS", "all"),
        )
        output = OutputConfig(
            audit_log_dir=Path(os.getenv("OUTPUT_DIR", "output")),
            audit_log_name=os.getenv("AUDIT_LOG_NAME", "ledger_events.jsonl"),
        )

        return cls(
            ledger=ledger,
            kafka=kafka,
            output=output,
            seed=_env_int("SEED"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
