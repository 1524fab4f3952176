"""Line segmentation and priority resolution.

Given a line and a PaletteConfig, split the line into contiguous spans and
decide which palette slot (if any) colors each one:

  * every pattern of every slot is run over the whole line; each
    non-overlapping match becomes an interval tagged with the slot index
  * the cut points are 0, len(line) and every interval edge
  * each pair of adjacent cut points is a span; the slots with an interval
    fully covering it compete, and the highest index wins

Zero-width matches add a cut point but can never cover a span, so they
never win one. The spans always cover [0, len(line)] exactly once.
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import NamedTuple

from ..config.palette import PaletteConfig

Interval = tuple[int, int]


class Span(NamedTuple):
    start: int
    end: int
    slot: int | None = None


def find_intervals(line: str, config: PaletteConfig) -> dict[int, list[Interval]]:
    """Match intervals per slot index; slots without matches are omitted."""
    intervals: dict[int, list[Interval]] = {}
    for index, slot in enumerate(config.slots):
        for pattern in slot.patterns:
            found = [m.span() for m in pattern.finditer(line)]
            if found:
                intervals.setdefault(index, []).extend(found)
    return intervals


def cut_points(line: str, intervals: dict[int, list[Interval]]) -> list[int]:
    points = {0, len(line)}
    for ivs in intervals.values():
        for start, end in ivs:
            points.add(start)
            points.add(end)
    return sorted(points)


def covers(interval: Interval, left: int, right: int) -> bool:
    return interval[0] <= left and right <= interval[1]


def winning_slot(candidates: Iterable[int]) -> int | None:
    """Later slots override earlier ones."""
    return max(candidates, default=None)


def segment(line: str, config: PaletteConfig) -> list[Span]:
    if not line:
        return [Span(0, 0, None)]
    intervals = find_intervals(line, config)
    points = cut_points(line, intervals)
    spans = []
    for left, right in zip(points, points[1:]):
        covering = {
            index for index, ivs in intervals.items()
            if any(covers(iv, left, right) for iv in ivs)
        }
        spans.append(Span(left, right, winning_slot(covering)))
    return spans


def span_text(line: str, spans: Iterable[Span]) -> Iterator[tuple[str, int | None]]:
    for span in spans:
        yield line[span.start:span.end], span.slot


__all__ = ["Span", "Interval", "find_intervals", "cut_points", "covers", "winning_slot", "segment", "span_text"]
