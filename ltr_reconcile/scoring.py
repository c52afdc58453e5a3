"""Structural evidence score and LTR similarity of a repeat region."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import MalformedInputError
from .model import FeatureType, RepeatRegion


@dataclass(frozen=True)
class Evidence:
    has_pbs: bool
    has_ppt: bool
    has_protein_match: bool
    has_inverted_repeat: bool
    tsd_lengths_equal: bool

    @property
    def score(self) -> int:
        return sum(
            (
                self.has_pbs,
                self.has_ppt,
                self.has_protein_match,
                self.has_inverted_repeat,
                self.tsd_lengths_equal,
            )
        )


def evidence_of(region: RepeatRegion) -> Evidence:
    tsds = region.children_of(FeatureType.TARGET_SITE_DUPLICATION)
    # Only the first two TSDs are compared; a lone TSD never counts.
    tsd_equal = len(tsds) >= 2 and tsds[0].length == tsds[1].length
    kinds = {child.kind for child in region.children}
    return Evidence(
        has_pbs=FeatureType.PRIMER_BINDING_SITE in kinds,
        has_ppt=FeatureType.RR_TRACT in kinds,
        has_protein_match=FeatureType.PROTEIN_MATCH in kinds,
        has_inverted_repeat=FeatureType.INVERTED_REPEAT in kinds,
        tsd_lengths_equal=tsd_equal,
    )


def ltr_similarity(region: RepeatRegion) -> float:
    """Percent similarity of the two LTRs, from the LTR_retrotransposon row."""

    for child in region.children_of(FeatureType.LTR_RETROTRANSPOSON):
        value = child.attr("ltr_similarity")
        if value is None:
            continue
        try:
            return float(value)
        except ValueError as exc:
            raise MalformedInputError(
                f"{region.key}: ltr_similarity {value!r} is not a number"
            ) from exc
    raise MalformedInputError(f"{region.key}: no LTR_retrotransposon with ltr_similarity")


def score_region(region: RepeatRegion) -> int:
    """Evidence score (0-5); a region without ltr_similarity is malformed."""

    ltr_similarity(region)
    return evidence_of(region).score
