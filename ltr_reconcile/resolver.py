"""Cross-set conflict resolution between overlapping LTR calls.

For every region of the high-stringency (secondary) set, overlapping
regions of the low-stringency (primary) set are looked up in the interval
index. The group is scored and exactly one member is kept; every member is
removed from the set that owned it, so no region takes part in two groups.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

from natsort import natsorted

from .errors import InvariantViolation, MissingRegionError
from .index import IntervalIndex
from .model import FeatureSet, RegionKey, RepeatRegion, region_sort_key
from .scoring import ltr_similarity, score_region

logger = logging.getLogger(__name__)

MODE_SCORE = "score"
MODE_SIMILARITY = "similarity"

PRIMARY = "primary"
SECONDARY = "secondary"
RESOLVED = "resolved"


@dataclass
class Resolution:
    """Outcome of one overlap group."""

    seqid: str
    query: RegionKey
    candidates: Tuple[RegionKey, ...]
    origins: Dict[RegionKey, str]
    scores: Dict[RegionKey, int]
    similarities: Dict[RegionKey, float]
    winner: RegionKey
    mode: str
    consumed: Tuple[RegionKey, ...] = field(default_factory=tuple)


def choose_winner(
    scores: Mapping[RegionKey, int], similarities: Mapping[RegionKey, float]
) -> Tuple[RegionKey, str]:
    """Pick the best candidate of a group.

    A candidate that is the unique best by score and also the unique best by
    similarity wins in ``score`` mode. Otherwise the first candidate with the
    highest similarity wins in ``similarity`` mode. Ties are broken by
    ascending region key.
    """

    if not scores or set(scores) != set(similarities):
        logger.error("scores: %s", _table(scores))
        logger.error("similarities: %s", _table(similarities))
        raise InvariantViolation(
            "cannot choose a winner from inconsistent candidate tables",
            scores=scores,
            similarities=similarities,
        )

    order = sorted(scores, key=region_sort_key)
    max_score = max(scores.values())
    max_sim = max(similarities.values())
    score_winners = [key for key in order if scores[key] == max_score]
    sim_winners = [key for key in order if similarities[key] == max_sim]

    best_by_score = score_winners[0]
    best_by_sim = sim_winners[0]
    if len(score_winners) == 1 and len(sim_winners) == 1 and best_by_score == best_by_sim:
        return best_by_score, MODE_SCORE
    return best_by_sim, MODE_SIMILARITY


def _table(values: Mapping[RegionKey, object]) -> str:
    return ", ".join(f"{key}={value}" for key, value in sorted(values.items(), key=lambda kv: region_sort_key(kv[0])))


def _overlaps(a: RegionKey, b: RegionKey) -> bool:
    return a.seqid == b.seqid and a.start <= b.end and b.start <= a.end


class ConflictResolver:
    """Resolves overlaps between a primary and a secondary FeatureSet.

    Both sets are consumed in place. Winners accumulate in :attr:`winners`;
    regions that never overlapped anything are left in their sets.
    """

    def __init__(self, primary: FeatureSet, secondary: FeatureSet, index: IntervalIndex) -> None:
        self.primary = primary
        self.secondary = secondary
        self.index = index
        self.winners: Dict[RegionKey, RepeatRegion] = {}
        self.resolutions: List[Resolution] = []
        self._winner_of: Dict[RegionKey, RegionKey] = {}

    def resolve(self) -> Dict[RegionKey, RepeatRegion]:
        for seqid in natsorted(self.secondary.sequences()):
            queue = sorted(self.secondary.regions(seqid), key=lambda r: region_sort_key(r.key))
            for region in queue:
                if region.key not in self.secondary:
                    continue
                self.resolve_region(region)
        logger.info(
            "Resolved %d overlap groups (%d by score, %d by similarity)",
            len(self.resolutions),
            sum(1 for r in self.resolutions if r.mode == MODE_SCORE),
            sum(1 for r in self.resolutions if r.mode == MODE_SIMILARITY),
        )
        return self.winners

    def _current_winner(self, key: RegionKey) -> RegionKey:
        while key in self._winner_of:
            key = self._winner_of[key]
        return key

    def candidates_for(self, region: RepeatRegion) -> List[Tuple[RegionKey, str]]:
        """Primary regions overlapping ``region`` plus overlapping earlier winners."""

        found: Dict[Tuple[RegionKey, str], None] = {}
        for hit in self.index.query(region.seqid, region.start, region.end):
            if hit in self.primary:
                found[(hit, PRIMARY)] = None
                continue
            holder = self._current_winner(hit)
            if holder not in self.winners:
                raise MissingRegionError(
                    f"{hit} is neither in the {self.primary.label or PRIMARY} set nor resolved. "
                    "This is a bug."
                )
            if _overlaps(holder, region.key):
                found[(holder, RESOLVED)] = None
        return sorted(found, key=lambda item: region_sort_key(item[0]))

    def resolve_region(self, region: RepeatRegion) -> Optional[Resolution]:
        others = self.candidates_for(region)
        if not others:
            return None

        members: List[Tuple[RegionKey, str]] = [(region.key, SECONDARY)] + others
        lookup = {key: self._lookup(key, origin) for key, origin in members}

        candidates = sorted(lookup, key=region_sort_key)
        scores = {key: score_region(lookup[key]) for key in candidates}
        similarities = {key: ltr_similarity(lookup[key]) for key in candidates}
        winner, mode = choose_winner(scores, similarities)

        consumed: List[RegionKey] = []
        owners: Dict[RegionKey, List[str]] = {}
        for key, origin in members:
            self._take(key, origin)
            owners.setdefault(key, []).append(origin)
            if key not in consumed:
                consumed.append(key)
        winner_region = lookup[winner]
        for key in consumed:
            if key != winner:
                self._winner_of[key] = winner
        self._winner_of.pop(winner, None)
        self.winners[winner] = winner_region

        resolution = Resolution(
            seqid=region.seqid,
            query=region.key,
            candidates=tuple(candidates),
            origins={key: "+".join(sorted(origins)) for key, origins in owners.items()},
            scores=scores,
            similarities=similarities,
            winner=winner,
            mode=mode,
            consumed=tuple(consumed),
        )
        self.resolutions.append(resolution)
        logger.debug(
            "%s: %d candidates, winner %s by %s (scores: %s; similarities: %s)",
            region.key,
            len(candidates),
            winner,
            mode,
            _table(scores),
            _table(similarities),
        )
        return resolution

    def _lookup(self, key: RegionKey, origin: str) -> RepeatRegion:
        if origin == RESOLVED:
            region = self.winners.get(key)
        else:
            region = self._owner(origin).get(key)
        if region is None:
            raise MissingRegionError(f"'{key}' not found in the {origin} set. This is a bug.")
        return region

    def _take(self, key: RegionKey, origin: str) -> RepeatRegion:
        self._lookup(key, origin)
        if origin == RESOLVED:
            return self.winners.pop(key)
        return self._owner(origin).pop(key)

    def _owner(self, origin: str) -> FeatureSet:
        return self.primary if origin == PRIMARY else self.secondary
