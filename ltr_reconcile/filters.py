"""Removal of chimeric, duplicated-domain and oversized LTR elements."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from natsort import natsorted

from .model import FeatureSet, RegionKey, RepeatRegion, region_sort_key

logger = logging.getLogger(__name__)

CHIMERIC = "chimeric"
DUPLICATED_DOMAIN = "duplicated_domain"
OVERSIZED = "oversized"


@dataclass(frozen=True)
class FilterConfig:
    # Elements above ~25 kb are not plausible for this class of repeats.
    max_length: int = 25_000
    gypsy_markers: Tuple[str, ...] = ("RVT_1", "Chromo")
    copia_markers: Tuple[str, ...] = ("RVT_2",)
    repeat_exempt: str = "chromo"


@dataclass(frozen=True)
class FilteredRegion:
    key: RegionKey
    reasons: Tuple[str, ...]


def domain_names(region: RepeatRegion) -> List[str]:
    """Protein-domain names of a region, truncated at the first semicolon."""

    names = []
    for match in region.protein_matches:
        name = match.attr("name")
        if name:
            names.append(name.split(";", 1)[0].strip())
    return names


def _has_marker(names: Sequence[str], markers: Sequence[str]) -> bool:
    lowered = [marker.lower() for marker in markers]
    return any(name.lower().startswith(marker) for name in names for marker in lowered)


def rejection_reasons(region: RepeatRegion, config: FilterConfig) -> Tuple[str, ...]:
    names = domain_names(region)
    reasons = []
    if _has_marker(names, config.gypsy_markers) and _has_marker(names, config.copia_markers):
        reasons.append(CHIMERIC)

    counts = Counter(name for name in names if config.repeat_exempt not in name.lower())
    if any(count > 1 for count in counts.values()):
        reasons.append(DUPLICATED_DOMAIN)

    if region.length >= config.max_length:
        reasons.append(OVERSIZED)
    return tuple(reasons)


def filter_compound_elements(
    feature_set: FeatureSet, config: FilterConfig = FilterConfig()
) -> List[FilteredRegion]:
    """Delete implausible regions from ``feature_set`` in place.

    Returns one record per deleted region, ordered by sequence and region key.
    """

    removed: List[FilteredRegion] = []
    for seqid in natsorted(feature_set.sequences()):
        for region in sorted(feature_set.regions(seqid), key=lambda r: region_sort_key(r.key)):
            reasons = rejection_reasons(region, config)
            if not reasons:
                continue
            feature_set.pop(region.key)
            removed.append(FilteredRegion(region.key, reasons))
            logger.debug("%s: removed %s (%s)", feature_set.label, region.key, ", ".join(reasons))

    if removed:
        logger.info(
            "%s: filtered %d compound or oversized elements, %d remain",
            feature_set.label or "input",
            len(removed),
            len(feature_set),
        )
    return removed
