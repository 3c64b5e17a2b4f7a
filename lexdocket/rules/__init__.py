"""Procedural deadline rules and calendar export."""

from lexdocket.rules.engine import RulesEngine, load_rule_pack
from lexdocket.rules.export import export_deadlines_to_ics, export_records_to_ics

__all__ = ["RulesEngine", "export_deadlines_to_ics", "export_records_to_ics", "load_rule_pack"]
