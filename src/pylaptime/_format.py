"""Lap duration formatting."""

from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Decimal

from pylaptime._constants import LAP_TIME_CEILING

_logger = logging.getLogger(__name__)

_CEILING = Decimal(LAP_TIME_CEILING)
_TWO_PLACES = Decimal("0.01")


def format_duration(ms: float) -> str:
    """Format a duration in milliseconds as seconds with two decimals.

    Values above ``99.99`` seconds render as ``"99.99"`` so long idle gaps
    never overflow the display. Rounding is half away from zero
    (``1005`` ms renders as ``"1.01"``).

    Negative and NaN inputs are clamped to zero.
    """
    if math.isnan(ms) or ms < 0:
        _logger.debug("Clamping invalid duration %r ms to zero", ms)
        return "0.00"
    if ms == 0:
        # Also catches -0.0, which Decimal would render as "-0.00".
        return "0.00"
    if math.isinf(ms):
        return LAP_TIME_CEILING

    seconds = Decimal(str(ms)) / 1000
    if seconds > _CEILING:
        return LAP_TIME_CEILING
    return str(seconds.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))
