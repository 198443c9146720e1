"""Schema loading and parsing.

This module handles loading YAML schema files that describe the records
stored back to back in a binser stream.
"""

import logging
from dataclasses import dataclass
from typing import Any

import yaml

from binser.codecs import Codec
from binser.registry import parse_type

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordSpec:
    """One record of a stream schema."""

    name: str
    codec: Codec[Any]


def load_schema(path: str) -> list[RecordSpec]:
    """Load a stream schema from a YAML file.

    The schema file should have the format:
    ```yaml
    records:
      - name: header
        type: pair[str, uint32]
      - name: samples
        type: list[float64]
    ```

    Args:
        path: Path to the YAML schema file

    Returns:
        Record specifications in stream order

    Raises:
        FileNotFoundError: If the schema file doesn't exist
        yaml.YAMLError: If the schema file is malformed YAML
        ValueError: If the schema has the wrong shape or an invalid type
    """
    with open(path) as f:
        schema = yaml.safe_load(f)

    records = parse_schema(schema)
    logger.trace(f"Loaded schema with {len(records)} records from {path}")
    return records


def parse_schema(schema: Any) -> list[RecordSpec]:
    """Validate a decoded schema document and resolve its type expressions.

    Args:
        schema: Document as returned by ``yaml.safe_load``

    Returns:
        Record specifications in stream order
    """
    if not isinstance(schema, dict) or not isinstance(schema.get("records"), list):
        raise ValueError("Schema must be a mapping with a 'records' list")

    records = []
    seen: set[str] = set()
    for index, entry in enumerate(schema["records"]):
        if not isinstance(entry, dict) or "name" not in entry or "type" not in entry:
            raise ValueError(f"Record #{index} must have 'name' and 'type' fields")

        name = str(entry["name"])
        if name in seen:
            raise ValueError(f"Duplicate record name: {name}")
        seen.add(name)

        try:
            codec = parse_type(str(entry["type"]))
        except ValueError as e:
            raise ValueError(f"Record {name}: {e}") from e
        records.append(RecordSpec(name=name, codec=codec))

    return records
