"""Wire format for ledger events.

Every sink writes the same JSON document per event: the envelope fields
at the top level, ``event_time`` as ISO-8601 UTC, and a ``data`` payload
restricted to JSON scalars, lists and objects.
"""

import json
from dataclasses import fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any

from rwa_ledger.models.base import Event


def serialize_value(value: Any) -> Any:
    """Reduce ``value`` to something ``json.dumps`` accepts unchanged."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Path):
        return str(value)
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: serialize_value(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, dict):
        return {str(k): serialize_value(v) for k, v in value.items()}
    if isinstance(value, (set, frozenset)):
        # Sets have no order; sort so repeated writes are byte-identical
        return sorted(serialize_value(v) for v in value)
    if isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]
    return value


def event_to_dict(event: Event) -> dict[str, Any]:
    return {
        "event_id": event.event_id,
        "event_type": event.event_type,
        "event_time": event.event_time.isoformat(),
        "source": event.source,
        "subject": event.subject,
        "data": serialize_value(event.data),
        "metadata": serialize_value(event.metadata),
    }


def encode_event(event: Event) -> bytes:
    """Encode an event as compact UTF-8 JSON, without a trailing newline."""
    return json.dumps(event_to_dict(event), ensure_ascii=False, separators=(",", ":")).encode(
        "utf-8"
    )


def decode_event(raw: bytes | str) -> dict[str, Any]:
    """Parse one encoded event back to its dictionary form."""
    return json.loads(raw)
