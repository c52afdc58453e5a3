"""Data structures shared by loading, filtering, resolution and output."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Mapping, NamedTuple, Optional, Tuple

_REGION_SUFFIX = re.compile(r"(\d+)$")


class FeatureType(Enum):
    REPEAT_REGION = "repeat_region"
    LTR_RETROTRANSPOSON = "LTR_retrotransposon"
    PRIMER_BINDING_SITE = "primer_binding_site"
    RR_TRACT = "RR_tract"
    TARGET_SITE_DUPLICATION = "target_site_duplication"
    INVERTED_REPEAT = "inverted_repeat"
    PROTEIN_MATCH = "protein_match"
    OTHER = "other"

    @classmethod
    def from_gff(cls, type_: str) -> "FeatureType":
        return _TYPE_LOOKUP.get(type_.lower(), cls.OTHER)


_TYPE_LOOKUP = {member.value.lower(): member for member in FeatureType if member is not FeatureType.OTHER}


@dataclass(frozen=True)
class Feature:
    """One GFF3 record, kept verbatim enough to be written back out."""

    seqid: str
    source: str
    type: str
    start: int
    end: int
    score: str
    strand: str
    phase: str
    attributes: Mapping[str, str] = field(default_factory=dict, compare=False)
    raw_attributes: str = ""

    @property
    def kind(self) -> FeatureType:
        return FeatureType.from_gff(self.type)

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def attr(self, key: str) -> Optional[str]:
        return self.attributes.get(key.lower())

    def contains(self, other: "Feature") -> bool:
        return self.seqid == other.seqid and self.start <= other.start and other.end <= self.end

    def columns(self) -> List[str]:
        return [
            self.seqid,
            self.source,
            self.type,
            str(self.start),
            str(self.end),
            self.score,
            self.strand,
            self.phase,
            self.raw_attributes,
        ]


class RegionKey(NamedTuple):
    """Identity of a repeat_region within one annotation set."""

    seqid: str
    region_id: str
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def __str__(self) -> str:
        return f"{self.seqid}.{self.region_id}[{self.start},{self.end}]"


def region_sort_key(key: RegionKey) -> Tuple:
    """Order regions by the numeric suffix of their ID, then by coordinates.

    IDs without a numeric suffix sort lexicographically after suffixed ones.
    """

    match = _REGION_SUFFIX.search(key.region_id)
    if match:
        return (0, int(match.group(1)), key.region_id, key.start, key.end)
    return (1, 0, key.region_id, key.start, key.end)


@dataclass
class RepeatRegion:
    """A repeat_region parent together with the children inside its span."""

    key: RegionKey
    parent: Feature
    children: List[Feature] = field(default_factory=list)

    @property
    def seqid(self) -> str:
        return self.key.seqid

    @property
    def region_id(self) -> str:
        return self.key.region_id

    @property
    def start(self) -> int:
        return self.key.start

    @property
    def end(self) -> int:
        return self.key.end

    @property
    def length(self) -> int:
        return self.key.length

    def children_of(self, kind: FeatureType) -> List[Feature]:
        return [child for child in self.children if child.kind is kind]

    @property
    def protein_matches(self) -> List[Feature]:
        return self.children_of(FeatureType.PROTEIN_MATCH)


class FeatureSet:
    """Repeat regions of one annotation file, grouped by sequence.

    Regions are removed with :meth:`pop`, which hands ownership to the caller.
    """

    def __init__(self, label: str = "") -> None:
        self.label = label
        self._by_seq: Dict[str, Dict[RegionKey, RepeatRegion]] = {}

    def add(self, region: RepeatRegion) -> None:
        bucket = self._by_seq.setdefault(region.seqid, {})
        bucket[region.key] = region

    def get(self, key: RegionKey) -> Optional[RepeatRegion]:
        return self._by_seq.get(key.seqid, {}).get(key)

    def pop(self, key: RegionKey) -> RepeatRegion:
        bucket = self._by_seq[key.seqid]
        region = bucket.pop(key)
        if not bucket:
            del self._by_seq[key.seqid]
        return region

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, RegionKey):
            return False
        return key in self._by_seq.get(key.seqid, {})

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._by_seq.values())

    def __iter__(self) -> Iterator[RepeatRegion]:
        for bucket in list(self._by_seq.values()):
            yield from list(bucket.values())

    def sequences(self) -> List[str]:
        return list(self._by_seq)

    def regions(self, seqid: str) -> List[RepeatRegion]:
        return list(self._by_seq.get(seqid, {}).values())

    def keys(self) -> List[RegionKey]:
        return [region.key for region in self]

    def __repr__(self) -> str:
        return f"FeatureSet(label={self.label!r}, regions={len(self)})"
