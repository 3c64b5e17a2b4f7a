"""LexDocket - calendar-aware hearing and deadline engine for legal practices.

Working-day arithmetic over the Greek court calendar plus the hearing and
procedural-deadline lifecycles that depend on it.
"""

__version__ = "0.1.0"
__author__ = "LexDocket Contributors"

from lexdocket.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__"]
