"""Schema-stamped JSON envelope for CLI output."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from lexdocket import __version__


@dataclass(frozen=True, slots=True)
class SchemaStamp:
    """Metadata identifying the shape and origin of a JSON payload."""

    schema_id: str
    schema_version: int
    producer: str
    produced_at: str


def build_schema_stamp(
    *,
    schema_id: str,
    schema_version: int,
    producer: str | None = None,
    produced_at: str | None = None,
) -> SchemaStamp:
    return SchemaStamp(
        schema_id=schema_id,
        schema_version=schema_version,
        producer=producer or f"lexdocket-{__version__}",
        produced_at=produced_at or datetime.now(UTC).isoformat(),
    )


def json_response(
    schema_id: str,
    schema_version: int,
    **data: Any,
) -> str:
    """Create schema-wrapped JSON response for CLI output.

    Args:
        schema_id: Identifier for the output type (e.g., "deadline_list").
        schema_version: Integer version for backward compatibility.
        **data: Payload data to include in the response.

    Returns:
        JSON string with schema metadata and payload.

    Example:
        >>> json_response("holidays", 1, year=2025, holidays=[])
        {
          "schema_id": "holidays",
          "schema_version": 1,
          "producer": "lexdocket-0.1.0",
          "produced_at": "2025-06-10T08:00:00+00:00",
          "year": 2025,
          "holidays": []
        }
    """
    stamp = build_schema_stamp(schema_id=schema_id, schema_version=schema_version)
    wrapped = {
        "schema_id": stamp.schema_id,
        "schema_version": stamp.schema_version,
        "producer": stamp.producer,
        "produced_at": stamp.produced_at,
        **data,
    }
    return json.dumps(wrapped, indent=2, default=str, ensure_ascii=False)
