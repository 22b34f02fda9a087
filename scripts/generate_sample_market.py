#!/usr/bin/env python3
"""Generate a sample marketplace and export it.

Runs the marketplace scenario (sellers list, buyers search, offer, visit and
message) and writes the resulting snapshot to the console, to one JSON file
per entity type, or to Kafka topics.

Usage
-----
    python scripts/generate_sample_market.py --sink json --seed 42
    python scripts/generate_sample_market.py --sink kafka --kafka-bootstrap kafka:9092
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from estate_market.config import MarketConfig, ScenarioConfig
from estate_market.exceptions import EstateMarketError
from estate_market.logging import setup_logging
from estate_market.scenarios import MarketplaceScenario
from estate_market.sinks import ConsoleSink, JsonFileSink, KafkaSink

logger = logging.getLogger("estate_market.scripts.generate_sample_market")


def build_sink(name: str, config: MarketConfig, max_records: int | None) -> Any:
    """Create the sink selected on the command line."""
    if name == "console":
        return ConsoleSink(pretty=True, max_records=max_records)
    if name == "json":
        return JsonFileSink(config.output.json_output_dir, pretty=config.output.pretty_json)
    return KafkaSink(config.kafka)


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Generate a sample real estate marketplace")
    parser.add_argument(
        "--sellers",
        type=int,
        default=10,
        help="Number of sellers to generate (default: 10)",
    )
    parser.add_argument(
        "--buyers",
        type=int,
        default=25,
        help="Number of buyers to generate (default: 25)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducibility (default: SEED env var)",
    )
    parser.add_argument(
        "--sink",
        choices=["console", "json", "kafka"],
        default="console",
        help="Where to export the generated records (default: console)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for the json sink (default: OUTPUT_DIR env var)",
    )
    parser.add_argument(
        "--kafka-bootstrap",
        type=str,
        default=None,
        help="Kafka bootstrap servers (default: KAFKA_BOOTSTRAP_SERVERS env var)",
    )
    parser.add_argument(
        "--max-records",
        type=int,
        default=3,
        help="Records printed per entity type by the console sink (default: 3)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Enforce status transition tables while generating",
    )
    args = parser.parse_args()

    try:
        config = MarketConfig.from_env()
    except EstateMarketError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    setup_logging(config.log_level, config.log_format)

    if args.seed is not None:
        config.seed = args.seed
    if args.output_dir is not None:
        config.output.json_output_dir = args.output_dir
    if args.kafka_bootstrap:
        config.kafka.bootstrap_servers = args.kafka_bootstrap
    config.scenario = ScenarioConfig(num_sellers=args.sellers, num_buyers=args.buyers)

    scenario = MarketplaceScenario.from_config(
        config.scenario,
        seed=config.seed,
        strict_transitions=args.strict or config.strict_status_transitions,
    )

    try:
        store = scenario.generate()
        sink = build_sink(args.sink, config, args.max_records)
        try:
            for entity_type, records in store.snapshot().items():
                sink.write_batch(entity_type, records)
        finally:
            sink.close()
    except EstateMarketError:
        logger.exception("Marketplace generation failed")
        return 1

    logger.info("Done: %s", store.summary())
    return 0


if __name__ == "__main__":
    sys.exit(main())
