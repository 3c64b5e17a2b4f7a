"""Concrete adapter implementations for lexdocket ports."""

from lexdocket.app.adapters.jsonl_store import JSONLRecordStore
from lexdocket.app.adapters.memory_store import InMemoryRecordStore
from lexdocket.app.adapters.notifier import Delivery, LogNotifier

__all__ = [
    "Delivery",
    "InMemoryRecordStore",
    "JSONLRecordStore",
    "LogNotifier",
]
