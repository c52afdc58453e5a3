"""End-to-end reconciliation of a primary and a secondary annotation set."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from .filters import FilterConfig, FilteredRegion, filter_compound_elements
from .index import IntervalIndex
from .merge import MergeResult, merge
from .parser import LoadResult
from .resolver import ConflictResolver, Resolution

logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    merged: MergeResult
    resolutions: List[Resolution] = field(default_factory=list)
    filtered_primary: List[FilteredRegion] = field(default_factory=list)
    filtered_secondary: List[FilteredRegion] = field(default_factory=list)


def reconcile(
    primary: LoadResult,
    secondary: LoadResult,
    config: FilterConfig = FilterConfig(),
) -> ReconcileResult:
    """Filter both sets, resolve their overlaps and merge what is left.

    The FeatureSets inside ``primary`` and ``secondary`` are consumed.
    """

    filtered_primary = filter_compound_elements(primary.features, config)
    filtered_secondary = filter_compound_elements(secondary.features, config)

    index = IntervalIndex.build(primary.features)
    logger.debug("Indexed %d primary regions on %d sequences", len(index), len(index.sequences()))

    resolver = ConflictResolver(primary.features, secondary.features, index)
    winners = resolver.resolve()
    merged = merge(winners, primary.features, secondary.features)
    return ReconcileResult(
        merged=merged,
        resolutions=resolver.resolutions,
        filtered_primary=filtered_primary,
        filtered_secondary=filtered_secondary,
    )
