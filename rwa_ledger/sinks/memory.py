"""In-memory sink for tests and in-process indexers."""

from rwa_ledger.models.base import Event


class MemorySink:
    """Keep published events in a list, in publication order."""

    def __init__(self) -> None:
        self.events: list[Event] = []

    def write_event(self, event: Event) -> None:
        self.events.append(event)

    def of_type(self, event_type: str) -> list[Event]:
        return [e for e in self.events if e.event_type == event_type]

    def for_property(self, property_id: int) -> list[Event]:
        return [e for e in self.events if e.property_id == property_id]

    def types(self) -> list[str]:
        return [e.event_type for e in self.events]

    def clear(self) -> None:
        self.events.clear()

    def close(self) -> None:
        return None
