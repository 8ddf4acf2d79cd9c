"""Lazy ordered merging of occurrence streams.

Periodic rules may never terminate, so merging holds exactly one pending
item (the head) per source and pulls one further item from one source per
yielded occurrence. Nothing is consumed until the merged stream is iterated,
and the stream can be abandoned at any point.
"""

import heapq
import logging
from collections.abc import Iterable, Iterator, Sequence

from .models import EventRecord, compare_events
from .recurrence import RecurrenceRule

logger = logging.getLogger(__name__)


class _Head:
    """Current item of one source inside the merge heap."""

    __slots__ = ("item", "index", "source")

    def __init__(self, item: EventRecord, index: int, source: Iterator[EventRecord]):
        self.item = item
        self.index = index
        self.source = source

    def __lt__(self, other: "_Head") -> bool:
        order = compare_events(self.item, other.item)
        if order:
            return order < 0
        # ties go to the source listed first
        return self.index < other.index


def ordered_merge(*sources: Iterable[EventRecord]) -> Iterator[EventRecord]:
    """Merge individually ascending sources into one ascending stream.

    Ties between records that sort together are broken by source position,
    so identical inputs always give the same output order.

    Args:
        *sources: Ascending iterables, possibly infinite

    Yields:
        Records from all sources in ascending order
    """
    heap: list[_Head] = []
    for index, source in enumerate(sources):
        iterator = iter(source)
        for item in iterator:
            heap.append(_Head(item, index, iterator))
            break
    heapq.heapify(heap)

    while heap:
        head = heap[0]
        yield head.item
        try:
            following = next(head.source)
        except StopIteration:
            heapq.heappop(heap)
            continue
        heapq.heapreplace(heap, _Head(following, head.index, head.source))


def merge_periodic(rules: Sequence[RecurrenceRule]) -> Iterator[EventRecord]:
    """k-way merge of every rule's occurrences, ties in rule order."""
    return ordered_merge(*(rule.produce() for rule in rules))


def merge_occurrences(
    singles: Iterable[EventRecord], rules: Sequence[RecurrenceRule]
) -> Iterator[EventRecord]:
    """Merge sorted one-off events with the periodic stream.

    One-off events win exact ties against generated occurrences.
    """
    logger.debug("Merging occurrences from %d periodic rules", len(rules))
    return ordered_merge(singles, merge_periodic(rules))
