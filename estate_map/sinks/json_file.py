"""JSON file sink for exporting listings and events to files."""

import json
import threading
from pathlib import Path
from typing import Any, Iterable

from estate_map.models import Event, Property
from estate_map.sinks.serialization import to_dict, to_feature_collection


class JsonFileSink:
    """Output data to JSON, JSON Lines and GeoJSON files."""

    def __init__(self, output_dir: str | Path, pretty: bool = False) -> None:
        """Initialize JSON file sink.

        Parameters
        ----------
        output_dir : str | Path
            Directory to write JSON files.
        pretty : bool
            Pretty-print JSON output.
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.pretty = pretty
        self._counts: dict[str, int] = {}
        self._lock = threading.Lock()

    def write_batch(self, entity_type: str, records: list[Any]) -> None:
        """Write a batch of records to a JSON file."""
        file_path = self.output_dir / f"{entity_type}.json"
        data = [to_dict(record) for record in records]
        self._dump(file_path, data)
        self._counts[entity_type] = len(records)

    def write_geojson(self, name: str, properties: Iterable[Property]) -> Path:
        """Write listings as a GeoJSON FeatureCollection for the map layer."""
        file_path = self.output_dir / f"{name}.geojson"
        collection = to_feature_collection(properties)
        self._dump(file_path, collection)
        self._counts[name] = len(collection["features"])
        return file_path

    def publish(self, topic: str, event: Event) -> None:
        """Append an event to a JSON Lines file named after the topic."""
        # Use topic name as filename (replace dots with underscores)
        file_path = self.output_dir / (topic.replace(".", "_") + ".jsonl")
        line = json.dumps(to_dict(event), ensure_ascii=False, default=str)
        with self._lock:
            with open(file_path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
            self._counts[topic] = self._counts.get(topic, 0) + 1

    def close(self) -> None:
        """Print summary."""
        print(f"JSON files written to: {self.output_dir}")
        for entity_type, count in self._counts.items():
            print(f"  {entity_type}: {count} records")

    def _dump(self, file_path: Path, data: Any) -> None:
        with open(file_path, "w", encoding="utf-8") as f:
            if self.pretty:
                json.dump(data, f, indent=2, ensure_ascii=False, default=str)
            else:
                json.dump(data, f, ensure_ascii=False, default=str)
