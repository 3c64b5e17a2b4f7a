"""Utility modules for common operations."""

from lexdocket.utils.cli_output import json_response
from lexdocket.utils.dates import format_greek, parse_date
from lexdocket.utils.jsonl import atomic_write_jsonl, read_jsonl

__all__ = [
    "atomic_write_jsonl",
    "format_greek",
    "json_response",
    "parse_date",
    "read_jsonl",
]
