"""Scoring policy for correct guesses."""

from __future__ import annotations

import math


def elapsed_seconds(started_at: float | None, now: float) -> int:
    if started_at is None:
        return 0
    return max(0, math.floor(now - started_at))


def points_for(elapsed: int, min_points: int = 20, max_points: int = 100) -> int:
    """Points for a guess made ``elapsed`` whole seconds into the round.

    Decays by one point per second from ``max_points`` and never drops below
    ``min_points``.
    """
    return max(min_points, max_points - max(0, int(elapsed)))
