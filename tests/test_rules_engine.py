from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from lexdocket.domain import ReminderRule
from lexdocket.errors import ValidationError
from lexdocket.rules import export_deadlines_to_ics, export_records_to_ics, load_rule_pack
from lexdocket.rules.engine import RulesEngine

RULES_DIR = Path(__file__).resolve().parents[1] / "lexdocket" / "rules"


@pytest.fixture()
def rules_engine() -> RulesEngine:
    return RulesEngine(RULES_DIR)


def test_bundled_pack_loads() -> None:
    record = load_rule_pack(RULES_DIR / "gr.yaml")

    assert record.pack.country == "GR"
    assert set(record.pack.events) == {"judgment_served", "order_served", "hearing_scheduled"}


def test_missing_pack_raises(temp_dir: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_rule_pack(temp_dir / "nope.yaml")


def test_malformed_pack_raises(temp_dir: Path) -> None:
    pack = temp_dir / "bad.yaml"
    pack.write_text("country: GR\nevents: {}\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_rule_pack(pack)


def test_judgment_served_remedies(rules_engine: RulesEngine) -> None:
    result = rules_engine.calculate_deadline("judgment_served", date(2025, 6, 10))

    deadlines = result["deadlines"]
    # Whit Monday (9 June) is before the base date, so only weekends are skipped.
    assert deadlines["appeal filing"]["date"] == "2025-07-08"
    assert deadlines["appeal filing"]["priority"] == "urgent"
    assert deadlines["cassation filing"]["date"] == "2025-07-10"
    assert result["metadata"]["country"] == "GR"
    assert deadlines["appeal filing"]["trace"] is None


def test_order_opposition(rules_engine: RulesEngine) -> None:
    result = rules_engine.calculate_deadline("order_served", date(2025, 6, 10))

    assert result["deadlines"]["opposition filing"]["date"] == "2025-07-01"


def test_backwards_offset_skips_holidays(rules_engine: RulesEngine) -> None:
    result = rules_engine.calculate_deadline("hearing_scheduled", date(2025, 6, 10))

    assert result["deadlines"]["additional pleadings"]["date"] == "2025-06-02"


def test_trace_included_when_explain(rules_engine: RulesEngine) -> None:
    result = rules_engine.calculate_deadline("order_served", date(2025, 6, 10), explain=True)

    trace = result["deadlines"]["opposition filing"]["trace"]
    assert trace == "Base 2025-06-10 +15 working days -> 2025-07-01"


def test_unknown_event(rules_engine: RulesEngine) -> None:
    with pytest.raises(ValidationError, match="Unknown event"):
        rules_engine.calculate_deadline("verdict_whispered", date(2025, 6, 10))


def test_court_date_roll(temp_dir: Path) -> None:
    (temp_dir / "gr.yaml").write_text(
        "\n".join(
            [
                "country: GR",
                'date_created: "2025-06-01"',
                'last_updated: "2025-06-01"',
                "events:",
                "  summer_filing:",
                "    deadlines:",
                "      - name: brief",
                "        offset:",
                "          days: 10",
                "          unit: calendar",
                "          court_date: true",
            ]
        ),
        encoding="utf-8",
    )
    engine = RulesEngine(temp_dir)

    result = engine.calculate_deadline("summer_filing", date(2025, 7, 25), explain=True)

    brief = result["deadlines"]["brief"]
    assert brief["date"] == "2025-09-01"
    assert "roll to next court date" in brief["trace"]


def test_build_deadlines(rules_engine: RulesEngine) -> None:
    deadlines = rules_engine.build_deadlines(
        "judgment_served",
        date(2025, 6, 10),
        "client-1",
        hearing_id="hearing-1",
        reminder_rules=[ReminderRule(offset_days=3)],
        created_by="lawyer-1",
    )

    assert [d.name for d in deadlines] == ["appeal filing", "cassation filing"]
    appeal, cassation = deadlines
    assert appeal.due_date == date(2025, 7, 8)
    assert appeal.working_days_only
    assert not cassation.working_days_only
    assert appeal.hearing_id == "hearing-1"
    assert appeal.category == "legal_remedy"
    assert appeal.reminders[0].scheduled_date == date(2025, 7, 5)
    assert appeal.status == "pending"
    assert appeal.id != cassation.id


def test_export_deadlines_to_ics(rules_engine: RulesEngine, temp_dir: Path) -> None:
    result = rules_engine.calculate_deadline("judgment_served", date(2025, 6, 10))
    output = temp_dir / "calendar" / "deadlines.ics"

    export_deadlines_to_ics(result, output)

    content = output.read_text(encoding="utf-8")
    assert "BEGIN:VCALENDAR" in content
    assert content.count("BEGIN:VEVENT") == 2
    assert "judgment_served: appeal filing" in content


def test_export_records_skips_closed(deadline, temp_dir: Path) -> None:
    timed = deadline.model_copy(update={"name": "timed", "due_time": "10:00"})
    closed = deadline.model_copy(update={"name": "closed", "status": "completed"})
    output = temp_dir / "records.ics"

    count = export_records_to_ics([deadline, timed, closed], output)

    content = output.read_text(encoding="utf-8")
    assert count == 2
    assert content.count("BEGIN:VEVENT") == 2
    assert "closed" not in content
