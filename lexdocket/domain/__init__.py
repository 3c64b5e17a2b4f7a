"""Hearing and deadline records and their lifecycles.

Pure domain layer: no storage, no transport. Transitions return
:class:`~lexdocket.domain.transitions.Transition` descriptors.
"""

from lexdocket.domain.deadlines import DeadlineLifecycle
from lexdocket.domain.hearings import HearingLifecycle
from lexdocket.domain.models import (
    AutomaticDeadlineConfig,
    CourtDescriptor,
    Deadline,
    Extension,
    Hearing,
    Opponent,
    Record,
    Recurrence,
    Reminder,
    ReminderRule,
    next_round,
)
from lexdocket.domain.reminders import ReminderScheduler
from lexdocket.domain.transitions import Transition

__all__ = [
    "AutomaticDeadlineConfig",
    "CourtDescriptor",
    "Deadline",
    "DeadlineLifecycle",
    "Extension",
    "Hearing",
    "HearingLifecycle",
    "Opponent",
    "Record",
    "Recurrence",
    "Reminder",
    "ReminderRule",
    "ReminderScheduler",
    "Transition",
    "next_round",
]
