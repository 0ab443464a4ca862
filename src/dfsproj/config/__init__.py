"""Configuration helpers for sports, services and runtime settings."""

from .rules import (
    RosterSlotRules,
    ServiceFields,
    SportRules,
    get_service_fields,
    get_slot_rules,
    get_sport_rules,
    iter_services,
    iter_sport_rules,
    normalize_service,
    normalize_sport,
)
from .settings import Settings, load_settings

__all__ = [
    "RosterSlotRules",
    "ServiceFields",
    "Settings",
    "SportRules",
    "get_service_fields",
    "get_slot_rules",
    "get_sport_rules",
    "iter_services",
    "iter_sport_rules",
    "load_settings",
    "normalize_service",
    "normalize_sport",
]
