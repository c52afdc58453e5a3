"""Combination of resolved winners with the untouched regions of both sets."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping

from .model import FeatureSet, RegionKey, RepeatRegion

logger = logging.getLogger(__name__)

Merged = Dict[str, Dict[RegionKey, RepeatRegion]]


@dataclass
class MergeStats:
    total_primary: int = 0
    total_secondary: int = 0
    total_winners: int = 0
    total_combined: int = 0

    def diagnostic_lines(self) -> List[str]:
        return [
            " ".join(["All", "part", "best", "combined"]),
            " ".join(
                str(value)
                for value in (
                    self.total_primary,
                    self.total_secondary,
                    self.total_winners,
                    self.total_combined,
                )
            ),
        ]


@dataclass
class MergeResult:
    features: Merged
    stats: MergeStats

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self.features.values())


def merge(
    winners: Mapping[RegionKey, RepeatRegion],
    primary: FeatureSet,
    secondary: FeatureSet,
) -> MergeResult:
    """Fold winners and leftover primary/secondary regions into one mapping.

    Inserting a key that is already present keeps the first region.
    """

    stats = MergeStats()
    merged: Merged = {}

    def insert(region: RepeatRegion) -> None:
        bucket = merged.setdefault(region.seqid, {})
        bucket.setdefault(region.key, region)

    for region in winners.values():
        stats.total_winners += 1
        insert(region)
    for region in primary:
        stats.total_primary += 1
        insert(region)
    for region in secondary:
        stats.total_secondary += 1
        insert(region)

    stats.total_combined = sum(len(bucket) for bucket in merged.values())
    if stats.total_combined < stats.total_winners + stats.total_primary + stats.total_secondary:
        logger.warning(
            "%d regions were present in more than one source and were kept once",
            stats.total_winners + stats.total_primary + stats.total_secondary - stats.total_combined,
        )
    return MergeResult(features=merged, stats=stats)
