"""Build event envelopes and fan them out to sinks."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Iterable, Protocol

from rwa_ledger.exceptions import SinkError
from rwa_ledger.models.base import Event
from rwa_ledger.models.enums import EventType
from rwa_ledger.sinks.serialization import serialize_value

logger = logging.getLogger(__name__)


class EventSink(Protocol):
    def write_event(self, event: Event) -> None: ...

    def close(self) -> None: ...


class EventPublisher:
    """Turn committed ledger changes into :class:`Event` envelopes.

    A failing sink is logged and skipped; it never affects other sinks or
    the ledger state that produced the event.
    """

    def __init__(self, sinks: list[EventSink] | None = None, source: str = "rwa-ledger") -> None:
        self.sinks: list[EventSink] = list(sinks or [])
        self.source = source

    def add_sink(self, sink: EventSink) -> None:
        self.sinks.append(sink)

    def build(self, event_type: EventType, property_id: int, data: dict[str, Any]) -> Event:
        payload = {"property_id": property_id}
        payload.update({k: serialize_value(v) for k, v in data.items()})
        return Event(
            event_id=uuid.uuid4().hex,
            event_type=event_type.value,
            event_time=datetime.now(timezone.utc),
            source=self.source,
            subject=str(property_id),
            data=payload,
        )

    def publish(self, pending: Iterable[tuple[EventType, int, dict[str, Any]]]) -> list[Event]:
        events = [self.build(event_type, pid, data) for event_type, pid, data in pending]
        for event in events:
            logger.info("%s property=%s", event.event_type, event.subject)
            for sink in self.sinks:
                try:
                    sink.write_event(event)
                except SinkError as e:
                    logger.error(
                        "Sink %s failed for %s: %s", type(sink).__name__, event.event_id, e
                    )
                except Exception:
                    logger.exception(
                        "Sink %s raised unexpectedly for %s", type(sink).__name__, event.event_id
                    )
        return events

    def close(self) -> None:
        for sink in self.sinks:
            sink.close()
