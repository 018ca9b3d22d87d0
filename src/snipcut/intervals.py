"""Interval algebra over clip time.

All functions are pure and assume validated ``TimeInterval`` input. Callers
at the boundary (the EDL builder) reject malformed ranges before they get
here.
"""

from collections.abc import Iterable

from snipcut.models.interval import TimeInterval

# Adjacency tolerance for the general algebra. Silence deduplication uses a
# coarser value (FusionOptions.dedup_gap) with the same merge scan.
MERGE_EPSILON = 0.001


def merge_intervals(
    intervals: Iterable[TimeInterval],
    epsilon: float = MERGE_EPSILON,
) -> list[TimeInterval]:
    """Merge overlapping or near-adjacent intervals.

    Args:
        intervals: Intervals in any order
        epsilon: Two intervals merge when ``next.start <= current.end + epsilon``

    Returns:
        Sorted, non-overlapping, minimal list of intervals
    """
    ordered = sorted(intervals, key=lambda iv: (iv.start, iv.end))
    if not ordered:
        return []

    merged: list[TimeInterval] = []
    cur_start, cur_end = ordered[0].start, ordered[0].end

    for iv in ordered[1:]:
        if iv.start <= cur_end + epsilon:
            cur_end = max(cur_end, iv.end)
        else:
            merged.append(TimeInterval(start=cur_start, end=cur_end))
            cur_start, cur_end = iv.start, iv.end

    merged.append(TimeInterval(start=cur_start, end=cur_end))
    return merged


def clip_intervals(
    intervals: Iterable[TimeInterval],
    total_duration: float,
) -> list[TimeInterval]:
    """Clamp intervals to ``[0, total_duration]`` and drop the ones left empty."""
    clipped: list[TimeInterval] = []
    for iv in intervals:
        start = min(max(iv.start, 0.0), total_duration)
        end = min(max(iv.end, 0.0), total_duration)
        if end > start:
            clipped.append(TimeInterval(start=start, end=end))
    return clipped


def invert_intervals(
    deleted: Iterable[TimeInterval],
    total_duration: float,
    epsilon: float = MERGE_EPSILON,
) -> list[TimeInterval]:
    """Return the complement of ``deleted`` within ``[0, total_duration]``.

    ``deleted`` is merged first, so unsorted or overlapping input is fine.
    """
    merged = merge_intervals(deleted, epsilon)
    if not merged:
        if total_duration <= 0:
            return []
        return [TimeInterval(start=0.0, end=total_duration)]

    keep: list[TimeInterval] = []
    cursor = 0.0
    for iv in merged:
        if iv.start >= total_duration:
            break
        if iv.start > cursor:
            keep.append(TimeInterval(start=cursor, end=iv.start))
        cursor = max(cursor, iv.end)

    if cursor < total_duration:
        keep.append(TimeInterval(start=cursor, end=total_duration))

    return keep


def remap_time(
    t: float,
    deleted: Iterable[TimeInterval],
    epsilon: float = MERGE_EPSILON,
) -> float:
    """Map a timestamp in original clip time to post-cut time.

    Every deleted interval that ends at or before ``t`` shifts it earlier by
    its full duration. A ``t`` strictly inside a deleted interval is clamped
    to the cut point.
    """
    offset = 0.0
    for iv in merge_intervals(deleted, epsilon):
        if iv.end <= t:
            offset += iv.duration
        elif iv.start < t:
            offset += t - iv.start
        else:
            break
    return t - offset


def total_duration(intervals: Iterable[TimeInterval]) -> float:
    """Sum of interval durations."""
    return sum(iv.duration for iv in intervals)


def overlap_amount(a: TimeInterval, b: TimeInterval) -> float:
    """Length of time two intervals share."""
    return a.overlap(b)
