"""JSON file sink for exporting marketplace snapshots."""

import json
import logging
from pathlib import Path
from typing import Any

from estate_market.exceptions import SinkError
from estate_market.sinks.serialization import to_dict

logger = logging.getLogger(__name__)


class JsonFileSink:
    """Output records to one JSON file per entity type."""

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
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise SinkError(f"Cannot create output directory {self.output_dir}: {exc}") from exc
        self.pretty = pretty
        self._counts: dict[str, int] = {}

    def write_batch(self, entity_type: str, records: list[Any]) -> None:
        """Write a batch of records to ``<entity_type>.json``."""
        file_path = self.output_dir / f"{entity_type}.json"
        data = [to_dict(record) for record in records]

        try:
            with open(file_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2 if self.pretty else None, ensure_ascii=False, default=str)
        except OSError as exc:
            raise SinkError(f"Cannot write {file_path}: {exc}") from exc

        self._counts[entity_type] = len(records)
        logger.debug("Wrote %d %s to %s", len(records), entity_type, file_path)

    def close(self) -> None:
        """Print summary."""
        print(f"JSON files written to: {self.output_dir}")
        for entity_type, count in self._counts.items():
            print(f"  {entity_type}: {count} records")
