"""Pytest configuration and fixtures."""

import gc
import shutil
import tempfile
import time
from collections.abc import Callable, Generator
from datetime import UTC, date, datetime
from pathlib import Path

import pytest

from lexdocket.config import Settings
from lexdocket.domain import CourtDescriptor, Deadline, Hearing, Opponent


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    try:
        yield Path(tmpdir)
    finally:
        # Force garbage collection to release any file handles
        gc.collect()
        time.sleep(0.1)
        shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def override_settings(temp_dir: Path) -> Generator[Settings, None, None]:
    """Provide isolated LexDocket settings scoped to tests."""

    import lexdocket.config as config_module

    original_settings = getattr(config_module, "_settings", None)

    data_dir = temp_dir / "appdata"
    config_dir = temp_dir / "appconfig"
    data_dir.mkdir(parents=True, exist_ok=True)
    config_dir.mkdir(parents=True, exist_ok=True)

    settings = config_module.Settings(
        data_dir=data_dir,
        config_dir=config_dir,
        audit_enabled=True,
    )

    config_module._settings = settings

    try:
        yield settings
    finally:
        config_module._settings = original_settings


@pytest.fixture
def clock_at() -> Callable[..., Callable[[], datetime]]:
    """Build a clock frozen at the given moment (UTC)."""

    def factory(year: int, month: int, day: int, hour: int = 9, minute: int = 0):
        moment = datetime(year, month, day, hour, minute, tzinfo=UTC)
        return lambda: moment

    return factory


@pytest.fixture
def hearing() -> Hearing:
    """Pending first-round hearing on Tuesday 10 June 2025."""
    return Hearing(
        client_id="client-1",
        court=CourtDescriptor(degree="Πρωτοδικείο", composition="Μονομελές", city="Αθηνών"),
        case_type="Αγωγή",
        case_number="1234/2025",
        hearing_date=date(2025, 6, 10),
        hearing_time="09:30",
        opponent=Opponent(name="Acme A.E.", kind="company"),
        created_by="lawyer-1",
    )


@pytest.fixture
def deadline() -> Deadline:
    return Deadline(
        client_id="client-1",
        name="memorandum filing",
        due_date=date(2025, 6, 20),
        priority="high",
        category="filing",
        created_by="lawyer-1",
    )
