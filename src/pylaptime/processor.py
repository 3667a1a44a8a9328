"""Passing classification, debouncing and lap computation."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from pylaptime._constants import FIRST_LAP_TIME
from pylaptime._format import format_duration
from pylaptime.config import LapTimeConfig
from pylaptime.models.messages import Passing
from pylaptime.models.transponder import TransponderState
from pylaptime.names import NameMapping
from pylaptime.render import RenderAdapter
from pylaptime.state.policy import OutOfOrderPolicy, PassingOutcome, classify_interval
from pylaptime.state.registry import TransponderRegistry

_logger = logging.getLogger(__name__)

_ONE_MS = timedelta(milliseconds=1)


class PassingProcessor:
    """Apply passings to the registry and emit render instructions.

    Every passing is classified as one of:

    * a marker impulse, resynchronising all running timers;
    * the first sighting of a transponder;
    * an accepted lap;
    * a duplicate detection within the debounce window;
    * an out-of-order passing (older than the stored one).
    """

    def __init__(
        self,
        config: LapTimeConfig,
        registry: TransponderRegistry,
        renderer: RenderAdapter,
        names: NameMapping | None = None,
    ) -> None:
        self._config = config
        self._registry = registry
        self._renderer = renderer
        self._names = names or NameMapping()
        self.first_passing_seen = False

    @property
    def names(self) -> NameMapping:
        return self._names

    @names.setter
    def names(self, names: NameMapping) -> None:
        self._names = names

    def handle_passing(self, passing: Passing) -> PassingOutcome:
        """Classify *passing*, update the registry and notify the renderer."""
        code = passing.transponder
        timestamp = passing.date

        if code == self._config.marker_code:
            self._apply_marker(timestamp)
            return PassingOutcome.MARKER

        if not self.first_passing_seen:
            self.first_passing_seen = True
            self._render_first_passing()

        state = self._registry.get(code)
        if state is None:
            state = TransponderState(
                code=code,
                last_passing_time=timestamp,
                last_lap_time=FIRST_LAP_TIME,
                lap_count=self._config.initial_lap_count,
            )
            self._registry.upsert(state)
            _logger.debug("First passing for %s at %s", code, timestamp.isoformat())
            self._render_update(state, is_new_entry=True)
            return PassingOutcome.FIRST_SIGHTING

        diff_ms = (timestamp - state.last_passing_time) / _ONE_MS
        outcome = classify_interval(diff_ms, threshold_ms=self._config.debounce_threshold_ms)

        if outcome == PassingOutcome.LAP:
            state.last_passing_time = timestamp
            state.last_lap_time = format_duration(diff_ms)
            state.lap_count += 1
            _logger.debug("Lap %d for %s: %s s", state.lap_count, code, state.last_lap_time)
            self._render_update(state, is_new_entry=False)
            return outcome

        if outcome == PassingOutcome.OUT_OF_ORDER:
            _logger.warning(
                "Passing for %s at %s is %.0f ms older than the previous one (%s)",
                code,
                timestamp.isoformat(),
                -diff_ms,
                self._config.out_of_order_policy.value,
            )
            if self._config.out_of_order_policy == OutOfOrderPolicy.IGNORE:
                return outcome
        else:
            _logger.debug("Debounced passing for %s (%.0f ms)", code, diff_ms)

        state.last_passing_time = timestamp
        return outcome

    def _apply_marker(self, timestamp: datetime) -> None:
        reset = self._config.marker_resets_laps
        _logger.info("Marker impulse at %s (reset laps: %s)", timestamp.isoformat(), reset)
        for state in self._registry.entries():
            state.last_passing_time = timestamp
            if reset:
                state.lap_count = self._config.initial_lap_count
                state.last_lap_time = FIRST_LAP_TIME
                self._render_update(state, is_new_entry=False)

    # ------------------------------------------------------------------
    # Renderer calls: a failing presentation layer must not stop timing.
    # ------------------------------------------------------------------

    def _render_update(self, state: TransponderState, *, is_new_entry: bool) -> None:
        try:
            self._renderer.on_transponder_update(
                state.code,
                state.last_lap_time,
                state.lap_count,
                self._names.display_name(state.code),
                is_new_entry,
            )
        except Exception:
            _logger.exception("Renderer failed to draw %s", state.code)

    def _render_first_passing(self) -> None:
        try:
            self._renderer.on_first_passing()
        except Exception:
            _logger.exception("Renderer failed on first passing")
