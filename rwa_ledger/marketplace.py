"""Single service object binding the directory, escrow and ledger."""

from __future__ import annotations

import logging

from rwa_ledger.config import RwaLedgerConfig
from rwa_ledger.directory import PropertyDirectory
from rwa_ledger.escrow import EscrowCoordinator
from rwa_ledger.events import EventPublisher, EventSink
from rwa_ledger.models.enums import PropertyState
from rwa_ledger.models.property import PendingPurchase, PropertyRecord
from rwa_ledger.sinks import JsonlFileSink, KafkaSink, MemorySink
from rwa_ledger.store.ledger import Ledger

logger = logging.getLogger(__name__)


def build_sinks(config: RwaLedgerConfig) -> list[EventSink]:
    """Instantiate the event sinks named in ``config.ledger.sinks``, in order."""
    sinks: list[EventSink] = []
    for name in config.ledger.sinks:
        if name == "memory":
            sinks.append(MemorySink())
        elif name == "jsonl":
            sinks.append(JsonlFileSink(config.output.audit_log_path))
        elif name == "kafka":
            sinks.append(KafkaSink(config.kafka))
    return sinks


class RwaMarketplace:
    """Real-world-asset property marketplace.

    Construct once at startup and pass it to whatever serves requests.
    Every operation takes the acting identity as its first argument.

    Parameters
    ----------
    platform_owner : str
        Identity that mints properties, manages verifiers and resolves
        purchases. It is also the first verifier.
    sinks : list[EventSink] | None
        Destinations for committed events.
    source : str
        Value of ``Event.source`` for emitted events.
    """

    def __init__(
        self,
        platform_owner: str,
        sinks: list[EventSink] | None = None,
        source: str = "rwa-ledger",
    ) -> None:
        self.publisher = EventPublisher(sinks, source=source)
        self.ledger = Ledger(platform_owner=platform_owner, publisher=self.publisher)
        self.directory = PropertyDirectory(self.ledger)
        self.escrow = EscrowCoordinator(self.ledger, self.directory)
        logger.info("Marketplace started for platform owner %s", platform_owner)

    @classmethod
    def from_config(cls, config: RwaLedgerConfig) -> "RwaMarketplace":
        return cls(
            platform_owner=config.ledger.platform_owner,
            sinks=build_sinks(config),
            source=config.ledger.source,
        )

    @property
    def platform_owner(self) -> str:
        return self.ledger.platform_owner

    # Funds
    def deposit(self, account: str, amount: int) -> None:
        with self.ledger.transaction() as ledger:
            ledger.funds.deposit(account, amount)

    def balance_of(self, account: str) -> int:
        with self.ledger.read() as ledger:
            return ledger.funds.balance_of(account)

    @property
    def escrow_balance(self) -> int:
        with self.ledger.read() as ledger:
            return ledger.funds.held

    # Directory
    def create_property(
        self,
        caller: str,
        address: str,
        price: int,
        area: int,
        legal_id: str,
        document_hash: str,
        token_uri: str,
    ) -> int:
        return self.directory.create_property(
            caller, address, price, area, legal_id, document_hash, token_uri
        )

    def set_token_uri(self, caller: str, property_id: int, token_uri: str) -> None:
        self.directory.set_token_uri(caller, property_id, token_uri)

    def get_property_uri(self, property_id: int) -> str:
        return self.directory.get_property_uri(property_id)

    def add_verifier(self, caller: str, identity: str) -> None:
        self.directory.add_verifier(caller, identity)

    def remove_verifier(self, caller: str, identity: str) -> None:
        self.directory.remove_verifier(caller, identity)

    def is_verifier(self, identity: str) -> bool:
        return self.directory.is_verifier(identity)

    def verify_property(self, caller: str, property_id: int) -> None:
        self.directory.verify_property(caller, property_id)

    def update_property_state(
        self,
        caller: str,
        property_id: int,
        new_state: PropertyState,
        new_price: int = 0,
    ) -> None:
        self.directory.update_property_state(caller, property_id, new_state, new_price)

    def get_property(self, property_id: int) -> PropertyRecord:
        return self.directory.get_property(property_id)

    def get_total_properties(self) -> int:
        return self.directory.get_total_properties()

    def get_all_properties(self) -> list[PropertyRecord]:
        return self.directory.get_all_properties()

    def get_properties_of_owner(self, owner: str) -> list[PropertyRecord]:
        return self.directory.get_properties_of_owner(owner)

    def owner_of(self, property_id: int) -> str:
        with self.ledger.read() as ledger:
            return ledger.registry.owner_of(property_id)

    # Escrow
    def request_purchase(self, caller: str, property_id: int, submitted_funds: int) -> PendingPurchase:
        return self.escrow.request_purchase(caller, property_id, submitted_funds)

    def complete_purchase(
        self,
        caller: str,
        property_id: int,
        success: bool,
        reason: str = "",
    ) -> None:
        self.escrow.complete_purchase(caller, property_id, success, reason)

    def get_pending_purchase(self, property_id: int) -> PendingPurchase | None:
        return self.escrow.get_pending_purchase(property_id)

    def close(self) -> None:
        """Flush and close every sink."""
        self.publisher.close()

    def __enter__(self) -> "RwaMarketplace":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
