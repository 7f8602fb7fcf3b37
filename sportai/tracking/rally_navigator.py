"""Rally selection and rallies-only playback.

Tracks which rally is highlighted as the playhead moves and, in
rallies-only mode, skips the dead time between rallies by seeking the
playback clock. The navigator is stateful and must be ticked once per
time update from a single caller.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from sportai.core.models import RallyInterval, SwingEvent

logger = logging.getLogger(__name__)


class PlaybackClock(Protocol):
    """The media element the navigator reads from and seeks."""

    @property
    def paused(self) -> bool: ...

    def seek(self, time: float) -> None: ...


@dataclass
class RallyNavigatorConfig:
    """Configuration for rally navigation."""

    rallies_only: bool = False
    buffer: float = 1.0  # Lead-in seconds shown before each rally
    end_skip_window: float = 0.1  # Skip once this close to the rally end


@dataclass
class NavigationUpdate:
    """Outcome of a single tick."""

    selected_rally_index: int | None
    seek_to: float | None = None


class RallyNavigator:
    """Auto-selects the active rally and skips between rallies."""

    def __init__(
        self,
        rallies: Sequence[RallyInterval],
        config: RallyNavigatorConfig | None = None,
    ):
        self.rallies = tuple(rallies)
        self.config = config or RallyNavigatorConfig()
        self.selected_rally_index: int | None = None

    @property
    def selected_rally(self) -> RallyInterval | None:
        if self.selected_rally_index is None:
            return None
        return self.rallies[self.selected_rally_index]

    def select(self, index: int | None) -> None:
        """Select a rally explicitly (e.g. from a timeline click)."""
        if index is not None and not 0 <= index < len(self.rallies):
            raise IndexError(f"Rally index {index} out of range (0-{len(self.rallies) - 1})")
        self.selected_rally_index = index

    def set_rallies_only(self, enabled: bool) -> None:
        self.config.rallies_only = enabled

    def set_buffer(self, buffer: float) -> None:
        self.config.buffer = max(0.0, buffer)

    def rally_at(self, time: float) -> int | None:
        """Index of the rally whose [start, end] contains ``time``."""
        for index, rally in enumerate(self.rallies):
            if rally.contains(time):
                return index
        return None

    def swings_in_rally(self, index: int, swings: Sequence[SwingEvent]) -> list[SwingEvent]:
        """Swings hit inside a rally, in hit order."""
        rally = self.rallies[index]
        return sorted(
            (s for s in swings if rally.contains(s.hit_timestamp)),
            key=lambda s: s.hit_timestamp,
        )

    # -------------------------------------------------------------------------
    # Per-tick update
    # -------------------------------------------------------------------------

    def tick(self, current_time: float, clock: PlaybackClock | None = None) -> NavigationUpdate:
        """Update selection and issue a seek if one is due.

        Args:
            current_time: Playhead position in seconds.
            clock: Playback clock; when None no seek is issued.

        Returns:
            The selection after this tick and the seek target, if any.
        """
        if not self.rallies:
            return NavigationUpdate(selected_rally_index=self.selected_rally_index)

        if self.config.rallies_only and self.selected_rally_index is None:
            self.selected_rally_index = 0

        entered = self.rally_at(current_time)
        if entered is not None and entered != self.selected_rally_index:
            logger.debug(f"Playhead entered rally {entered} at {current_time:.2f}s")
            self.selected_rally_index = entered

        seek_to = None
        if self.config.rallies_only and clock is not None and not clock.paused:
            seek_to = self._skip_target(current_time)
            if seek_to is not None:
                logger.debug(f"Skipping from {current_time:.2f}s to {seek_to:.2f}s")
                clock.seek(seek_to)

        return NavigationUpdate(
            selected_rally_index=self.selected_rally_index,
            seek_to=seek_to,
        )

    def _skip_target(self, current_time: float) -> float | None:
        """Seek target for rallies-only playback, or None to keep playing."""
        buffer = self.config.buffer

        active = next(
            (
                index for index, rally in enumerate(self.rallies)
                if rally.buffered_start(buffer) <= current_time <= rally.end_time
            ),
            None,
        )

        if active is not None:
            time_to_end = self.rallies[active].end_time - current_time
            if 0 < time_to_end <= self.config.end_skip_window and active + 1 < len(self.rallies):
                target = self.rallies[active + 1].buffered_start(buffer)
                # Lead-in overlapping this rally: keep playing instead of seeking back
                if target > current_time:
                    return target
            return None

        upcoming = next(
            (rally for rally in self.rallies if rally.start_time > current_time),
            None,
        )
        if upcoming is not None:
            return upcoming.buffered_start(buffer)

        # Past the last rally: let playback continue
        return None
