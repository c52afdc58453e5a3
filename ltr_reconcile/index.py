"""Per-sequence interval index over repeat_region spans."""

from __future__ import annotations

from typing import Dict, List, Set

from intervaltree import Interval, IntervalTree

from .model import FeatureSet, RegionKey


class IntervalIndex:
    """Read-only overlap lookup built from one FeatureSet.

    Spans are 1-based inclusive; the trees hold half-open ``[start, end + 1)``.
    """

    def __init__(self, trees: Dict[str, IntervalTree]) -> None:
        self._trees = trees

    @classmethod
    def build(cls, feature_set: FeatureSet) -> "IntervalIndex":
        trees: Dict[str, IntervalTree] = {}
        for region in feature_set:
            tree = trees.setdefault(region.seqid, IntervalTree())
            tree.add(Interval(region.start, region.end + 1, region.key))
        return cls(trees)

    def query(self, seqid: str, start: int, end: int) -> Set[RegionKey]:
        tree = self._trees.get(seqid)
        if tree is None:
            return set()
        return {interval.data for interval in tree.overlap(start, end + 1)}

    def sequences(self) -> List[str]:
        return sorted(self._trees)

    def __len__(self) -> int:
        return sum(len(tree) for tree in self._trees.values())
