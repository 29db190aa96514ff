"""
Derived answers — companion fields auto-calculated when an answer changes.

Knock-through openings: once the opening width and the support type are both
known, the steel or lintel length for the selected support becomes
width + 0.3 m (150mm bearing each end). New and existing openings are
tracked independently.

Each derived field carries a provenance in answers["derivedFieldSources"]:
absent (never set), "auto" (written here) or "manual" (typed by the user).
Manual values are left alone unless PRESERVE_MANUAL_DERIVED_FIELDS is off.
The plain overwrite-on-every-edit behaviour, where a trigger change always
replaces the length, is available per call with preserve_manual=False or
globally by setting PRESERVE_MANUAL_DERIVED_FIELDS=false.
"""

import logging
from typing import Optional

from ..calculators.base import round_money, to_number
from ..config import settings

logger = logging.getLogger(__name__)

BEARING_ALLOWANCE_M = 0.3
SOURCES_KEY = "derivedFieldSources"

AUTO = "auto"
MANUAL = "manual"

OPENINGS = {
    "new": {
        "width": "knockThroughWidth",
        "support": "knockThroughSupport",
        "lengths": {
            "steel": "knockThroughSteelLength",
            "lintel": "knockThroughLintelLength",
        },
    },
    "existing": {
        "width": "knockThroughWidthExisting",
        "support": "knockThroughSupportExisting",
        "lengths": {
            "steel": "knockThroughSteelLengthExisting",
            "lintel": "knockThroughLintelLengthExisting",
        },
    },
}

TRIGGER_KEYS = {
    opening[role]: name
    for name, opening in OPENINGS.items()
    for role in ("width", "support")
}
DERIVED_KEYS = {
    key: name
    for name, opening in OPENINGS.items()
    for key in opening["lengths"].values()
}


def apply_derived_updates(changed_key: str, value, answers: dict,
                          preserve_manual: Optional[bool] = None) -> dict:
    """
    Return a new answer map with `changed_key` set to `value` plus any
    derived companion fields. The input map is never mutated.
    """
    if preserve_manual is None:
        preserve_manual = settings.PRESERVE_MANUAL_DERIVED_FIELDS

    updated = dict(answers)
    updated[changed_key] = value

    if changed_key in DERIVED_KEYS:
        updated[SOURCES_KEY] = _mark_manual(answers, changed_key, value)
        return updated

    opening_name = TRIGGER_KEYS.get(changed_key)
    if opening_name is None:
        return updated

    opening = OPENINGS[opening_name]
    width = parse_width(updated.get(opening["width"]))
    support = updated.get(opening["support"])
    target = opening["lengths"].get(support) if isinstance(support, str) else None
    if width is None or target is None:
        logger.debug("No derived length for %s opening (width=%r, support=%r)",
                     opening_name, updated.get(opening["width"]), support)
        return updated

    sources = dict(answers.get(SOURCES_KEY) or {})
    if preserve_manual and sources.get(target) == MANUAL:
        logger.debug("Keeping manual %s=%r", target, updated.get(target))
        return updated

    updated[target] = round_money(width + BEARING_ALLOWANCE_M)
    sources[target] = AUTO
    updated[SOURCES_KEY] = sources
    return updated


def parse_width(value) -> Optional[float]:
    """Opening width in metres, or None when missing, non-numeric or not positive."""
    width = to_number(value)
    if width is None or width <= 0:
        return None
    return width


def _mark_manual(answers: dict, key: str, value) -> dict:
    sources = dict(answers.get(SOURCES_KEY) or {})
    if value is None or value == "":
        # Clearing the field hands it back to auto-calculation
        sources.pop(key, None)
    else:
        sources[key] = MANUAL
    return sources
