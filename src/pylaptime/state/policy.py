"""Deterministic passing classification policy.

This module contains *no* registry access and no rendering; it only decides
what a passing means given the time elapsed since the previous one.
"""

from __future__ import annotations

from enum import StrEnum


class OutOfOrderPolicy(StrEnum):
    """How to treat a passing timestamped before the stored one."""

    DEBOUNCE = "debounce"
    """Treat as a duplicate detection: only the passing time moves (backwards)."""

    IGNORE = "ignore"
    """Drop the passing entirely; the stored state is left untouched."""


class PassingOutcome(StrEnum):
    MARKER = "marker"
    FIRST_SIGHTING = "first_sighting"
    LAP = "lap"
    DEBOUNCED = "debounced"
    OUT_OF_ORDER = "out_of_order"


def classify_interval(diff_ms: float, *, threshold_ms: float) -> PassingOutcome:
    """Classify a passing for a known transponder.

    Policy:
    - strictly above the threshold: a new lap.
    - negative: delivered out of order.
    - otherwise: a duplicate detection of the same physical pass.
    """
    if diff_ms > threshold_ms:
        return PassingOutcome.LAP
    if diff_ms < 0:
        return PassingOutcome.OUT_OF_ORDER
    return PassingOutcome.DEBOUNCED
