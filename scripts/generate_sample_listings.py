#!/usr/bin/env python3
"""Generate sample listings, run a crowd review over them and export the map data.

Writes ``properties.json`` and ``properties.geojson`` (the FeatureCollection the
map layer loads) to the output directory, plus a JSON Lines file of every
listing and vote event. With ``--kafka-bootstrap`` events also go to Kafka.
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from estate_map.config import EstateMapConfig
from estate_map.logging import get_logger, setup_logging
from estate_map.scenarios import CrowdReviewScenario
from estate_map.sinks import ConsoleSink, JsonFileSink, KafkaSink
from estate_map.sinks.kafka import PRESETS, preset

logger = get_logger(__name__)


class _FanOut:
    """Publish every event to several sinks."""

    def __init__(self, sinks: list) -> None:
        self.sinks = sinks

    def publish(self, topic, event) -> None:
        for sink in self.sinks:
            sink.publish(topic, event)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate sample listings for the map")
    parser.add_argument("--properties", type=int, default=200, help="Number of listings (default: 200)")
    parser.add_argument("--voters", type=int, default=50, help="Number of voters (default: 50)")
    parser.add_argument("--votes-per-voter", type=int, default=20, help="Votes each voter casts (default: 20)")
    parser.add_argument("--overpriced-rate", type=float, default=0.1, help="Share of disputed listings (default: 0.1)")
    parser.add_argument("--workers", type=int, default=8, help="Concurrent voting threads (default: 8)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (default: SEED env or none)")
    parser.add_argument("--output-dir", type=Path, default=None, help="Output directory (default: OUTPUT_DIR env)")
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON files")
    parser.add_argument("--kafka-bootstrap", type=str, default=None, help="Also publish events to Kafka")
    parser.add_argument(
        "--kafka-preset",
        choices=sorted(PRESETS),
        default=None,
        help="Producer preset for --kafka-bootstrap (default: KAFKA_ACKS and batching from config)",
    )
    parser.add_argument("--console", action="store_true", help="Also print events and listings to stdout")
    parser.add_argument("--log-level", type=str, default=None, help="Log level (default: LOG_LEVEL env)")
    parser.add_argument("--log-format", choices=["standard", "json"], default="standard")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run the crowd review and export listings."""
    args = parse_args(argv)
    config = EstateMapConfig.from_env()
    if args.seed is not None:
        config.seed = args.seed
    if args.output_dir is not None:
        config.output.json_output_dir = args.output_dir
    if args.pretty:
        config.output.pretty_json = True
    if args.kafka_bootstrap:
        config.kafka.bootstrap_servers = args.kafka_bootstrap

    setup_logging(args.log_level or config.log_level, args.log_format)

    json_sink = JsonFileSink(config.output.json_output_dir, pretty=config.output.pretty_json)
    event_sinks: list = [json_sink]
    if args.kafka_bootstrap:
        if args.kafka_preset:
            event_sinks.append(KafkaSink(preset(args.kafka_preset, config.kafka.bootstrap_servers)))
        else:
            event_sinks.append(KafkaSink(config.kafka))
    export_sinks: list = [json_sink]
    if args.console:
        console_sink = ConsoleSink(pretty=False, max_records=10)
        event_sinks.append(console_sink)
        export_sinks.append(console_sink)

    scenario = CrowdReviewScenario(
        num_properties=args.properties,
        num_voters=args.voters,
        votes_per_voter=args.votes_per_voter,
        overpriced_rate=args.overpriced_rate,
        max_workers=args.workers,
        seed=config.seed,
        config=config,
        events=_FanOut(event_sinks),
    )
    summary = scenario.run()

    scenario.export(export_sinks)
    geojson_path = json_sink.write_geojson("properties", scenario.read_model.query().data)
    logger.info("GeoJSON written to %s", geojson_path)

    for sink in event_sinks:
        sink.close()

    print("\n" + "=" * 60)
    print("Summary")
    print("=" * 60)
    for name, value in summary.to_dict().items():
        print(f"{name + ':':22}{value}")
    print(f"\nAll files saved to: {config.output.json_output_dir}")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
