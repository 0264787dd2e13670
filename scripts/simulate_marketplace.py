#!/usr/bin/env python3
"""Run a simulated property marketplace session.

Mints synthetic properties, verifies and lists them, lets generated buyers
request purchases and resolves each request as a sale or a refund. Every
committed event goes to the sinks selected on the command line, so the
script doubles as a smoke test for the JSON Lines audit log and Kafka.
"""

import argparse
import sys
from dataclasses import replace
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from rwa_ledger.config import RwaLedgerConfig
from rwa_ledger.exceptions import ConfigurationError, RwaLedgerError
from rwa_ledger.generators import PropertyGenerator
from rwa_ledger.logging import get_logger, setup_logging
from rwa_ledger.marketplace import RwaMarketplace
from rwa_ledger.models.enums import PropertyState
from rwa_ledger.sinks.kafka import ensure_topics

logger = get_logger("simulate_marketplace")


def run_session(
    market: RwaMarketplace,
    generator: PropertyGenerator,
    num_properties: int,
    num_buyers: int,
    settle_rate: float,
) -> dict[str, int]:
    """Drive one marketplace session and return outcome counts."""
    owner = market.platform_owner
    verifier = generator.wallet_address()
    market.add_verifier(owner, verifier)

    buyers = [generator.wallet_address() for _ in range(num_buyers)]
    outcomes = {"listed": 0, "requested": 0, "sold": 0, "refunded": 0, "rejected": 0}

    for draft in generator.generate_many(num_properties):
        property_id = market.create_property(owner, **draft.as_kwargs())
        # Leave roughly one in five unverified to exercise the verification gate
        if generator.chance(0.8):
            market.verify_property(verifier, property_id)
        market.update_property_state(owner, property_id, PropertyState.FOR_SALE)
        outcomes["listed"] += 1

        buyer = generator.random.choice(buyers)
        market.deposit(buyer, draft.price)
        try:
            market.request_purchase(buyer, property_id, draft.price)
        except RwaLedgerError as e:
            logger.info("Purchase of %d rejected: %s", property_id, e)
            outcomes["rejected"] += 1
            continue
        outcomes["requested"] += 1

        if generator.chance(settle_rate):
            market.complete_purchase(owner, property_id, True)
            outcomes["sold"] += 1
        else:
            market.complete_purchase(owner, property_id, False, "documents invalid")
            outcomes["refunded"] += 1

    return outcomes


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Simulate a property marketplace session")
    parser.add_argument(
        "--properties",
        type=int,
        default=10,
        help="Number of properties to mint (default: 10)",
    )
    parser.add_argument(
        "--buyers",
        type=int,
        default=3,
        help="Number of buyer identities (default: 3)",
    )
    parser.add_argument(
        "--settle-rate",
        type=float,
        default=0.7,
        help="Share of purchase requests that settle instead of refund (default: 0.7)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducibility (default: SEED env or none)",
    )
    parser.add_argument(
        "--sinks",
        type=str,
        default=None,
        help="Comma-separated event sinks: memory, jsonl, kafka (default: RWA_EVENT_SINKS env)",
    )
    parser.add_argument(
        "--log-format",
        type=str,
        choices=["standard", "json"],
        default=None,
        help="Log output format (default: LOG_FORMAT env or standard)",
    )
    parser.add_argument(
        "--create-topics",
        action="store_true",
        help="Create missing Kafka topics before the session (kafka sink only)",
    )
    args = parser.parse_args()

    try:
        config = RwaLedgerConfig.from_env()
        if args.sinks:
            config.ledger = replace(
                config.ledger, sinks=[s.strip() for s in args.sinks.split(",") if s.strip()]
            )
    except ConfigurationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(2)

    seed = args.seed if args.seed is not None else config.seed
    setup_logging(config.log_level, args.log_format or config.log_format)

    if args.create_topics and "kafka" in config.ledger.sinks:
        ensure_topics(config.kafka)

    generator = PropertyGenerator(seed=seed)
    with RwaMarketplace.from_config(config) as market:
        outcomes = run_session(market, generator, args.properties, args.buyers, args.settle_rate)
        summary = market.ledger.summary()

    logger.info("=" * 60)
    for key, value in outcomes.items():
        logger.info("  %-10s %d", key, value)
    for key, value in summary.items():
        logger.info("  %-18s %d", key, value)
    logger.info("=" * 60)


if __name__ == "__main__":
    main()
