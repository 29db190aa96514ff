"""
Abstract base class for dimensional calculators.

Input: flat dict of dimensional answers (camelCase keys, as stored in the answer map)
Output: dict of derived quantities, every length/area/volume rounded to 2 dp
"""

import logging
import math
from abc import ABC, abstractmethod
from decimal import Decimal, ROUND_HALF_UP

logger = logging.getLogger(__name__)


def round_money(amount: float) -> float:
    """Standard 2 dp rounding used for every money-style figure and measurement. Ties round up."""
    return float(Decimal(repr(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def to_number(value, default=None):
    """
    Lenient number parsing shared by the calculators, the answer slots and
    the derived-field rules.

    Accepts ints, floats and numeric strings (surrounding blanks and a
    trailing "m" unit are ignored). None, booleans, blanks, garbage and
    non-finite values (nan, inf) all give `default`.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else default
    try:
        text = str(value).strip().rstrip("m").strip()
        parsed = float(text) if text else default
    except (ValueError, TypeError):
        logger.debug("Unparseable number %r, using default %s", value, default)
        return default
    if parsed is not None and not math.isfinite(parsed):
        return default
    return parsed


class BaseCalculator(ABC):
    """All dimensional calculators inherit from this."""

    @abstractmethod
    def calculate(self, fields: dict) -> dict:
        """
        Takes the dimensional inputs.
        Returns the derived quantities dict. Must never raise.
        """
        pass

    # --- Helper methods for all calculators ---

    def parse_number(self, value, default: float = 0.0) -> float:
        """Parse a numeric value from user input. Blank or garbage falls back to default."""
        return to_number(value, default)

    def parse_optional(self, value):
        """Like parse_number, but missing input stays None instead of taking a default."""
        return to_number(value)

    def parse_positive(self, value, default: float) -> float:
        """Parse a number, treating zero/negative/missing as 'not supplied'."""
        parsed = self.parse_number(value, default=0.0)
        return parsed if parsed > 0 else default

    def mm_to_m(self, mm: float) -> float:
        return mm / 1000.0

    def perimeter(self, length: float, width: float) -> float:
        """Rectangle perimeter, same units as the inputs."""
        return 2.0 * (length + width)
