"""JSONL reading and writing helpers with durability guarantees."""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any, cast


def _serialize(record: Any) -> str:
    """Convert a mapping or Pydantic model into one JSON line."""
    if hasattr(record, "model_dump"):
        payload = cast(Any, record).model_dump(mode="json")
    elif isinstance(record, dict):
        payload = record
    else:
        raise TypeError(
            "Unsupported record type for JSONL serialization: "
            f"{type(record)!r}. Provide dict or Pydantic model."
        )
    return json.dumps(payload, separators=(",", ":"), sort_keys=True, ensure_ascii=False)


def read_jsonl(path: Path) -> Iterator[dict[str, Any]]:
    """Yield one mapping per non-blank line of ``path``.

    Raises:
        ValueError: If a line is not a JSON object
    """
    with Path(path).open("r", encoding="utf-8") as handle:
        for line_num, raw_line in enumerate(handle, 1):
            line = raw_line.strip()
            if not line:
                continue
            try:
                payload = json.loads(line)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid JSON at line {line_num} in {path}: {exc}") from exc
            if not isinstance(payload, dict):
                raise ValueError(f"Expected an object at line {line_num} in {path}")
            yield payload


def atomic_write_jsonl(path: Path, records: Iterable[Any]) -> None:
    """Write ``records`` to ``path`` atomically as JSONL.

    Lines go to a temporary file in the same directory which replaces
    ``path`` with ``os.replace`` only after it is flushed and fsynced. If
    anything fails before the replace, the previous contents stay in place.
    """
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)

    fd: int | None = None
    tmp_path: str | None = None

    try:
        fd, tmp_path = tempfile.mkstemp(
            dir=str(destination.parent),
            prefix=destination.name,
            suffix=".tmp",
            text=True,
        )

        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            fd = None  # Ownership transferred to file object
            for record in records:
                handle.write(_serialize(record))
                handle.write("\n")
            handle.flush()
            os.fsync(handle.fileno())

        os.replace(tmp_path, destination)
        tmp_path = None
    finally:
        if fd is not None:
            os.close(fd)
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except FileNotFoundError:
                pass
