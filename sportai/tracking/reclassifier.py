"""Court-crossing constraint for inferred bounces.

The trajectory heuristics cannot tell a bounce near the net from a volley.
If an inferred floor/wall bounce is followed by an event on the other half
of the court with no shot in between, the ball could only have crossed the
net because it was struck, so the first event is relabeled as an inferred
swing.
"""

from __future__ import annotations

import bisect
import logging
from collections.abc import Sequence

from sportai.core.models import BounceEvent, BounceKind, SwingEvent

logger = logging.getLogger(__name__)

COURT_CENTER_Y = 0.5


def _has_swing_between(hit_times: list[float], start: float, end: float) -> bool:
    """True if a sorted hit time lies strictly inside (start, end)."""
    idx = bisect.bisect_right(hit_times, start)
    return idx < len(hit_times) and hit_times[idx] < end


def reclassify_bounces(
    bounces: Sequence[BounceEvent],
    swings: Sequence[SwingEvent],
    center_y: float = COURT_CENTER_Y,
) -> list[BounceEvent]:
    """Relabel inferred bounces that precede an unexplained net crossing.

    Single left-to-right pass over adjacent events in time order. Only the
    earlier event of a pair is relabeled; earlier pairs are never revisited.

    Args:
        bounces: Detected and synthetic events in any order.
        swings: All in-rally swings.
        center_y: Net line in normalized court coordinates.

    Returns:
        New list sorted by timestamp. Input events are not modified.
    """
    ordered = sorted(bounces, key=lambda b: b.timestamp)
    if len(ordered) < 2:
        return ordered

    hit_times = sorted(s.hit_timestamp for s in swings)
    result: list[BounceEvent] = []
    relabeled = 0

    for curr, nxt in zip(ordered, ordered[1:]):
        if (
            curr.kind.is_inferred_passive
            and curr.court_side(center_y) != nxt.court_side(center_y)
            and not _has_swing_between(hit_times, curr.timestamp, nxt.timestamp)
        ):
            logger.debug(
                f"Bounce at {curr.timestamp:.2f}s crosses to "
                f"{nxt.court_side(center_y).value} side without a swing, relabeling"
            )
            curr = curr.with_kind(BounceKind.SWING_INFERRED)
            relabeled += 1
        result.append(curr)

    result.append(ordered[-1])

    if relabeled:
        logger.info(f"Reclassified {relabeled} inferred bounces as swings")

    return result
