"""GFF3 reader that groups LTR annotation rows by their repeat_region parent."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set

from .errors import MalformedInputError
from .model import Feature, FeatureSet, FeatureType, RegionKey, RepeatRegion

logger = logging.getLogger(__name__)

AttrMap = Dict[str, str]

FASTA_DIRECTIVE = "##FASTA"


def parse_attrs(attr_str: str) -> AttrMap:
    """Parse a GFF3 attribute column into a dict with lower-cased keys.

    Both ``key=value`` and GTF-style ``key "value"`` pairs are accepted.
    """

    attrs: AttrMap = {}
    for part in attr_str.split(";"):
        part = part.strip()
        if not part:
            continue
        if "=" in part:
            key, value = part.split("=", 1)
        elif " " in part:
            key, value = part.split(" ", 1)
        else:
            key, value = part, ""
        attrs[key.strip().lower()] = value.strip().strip('"')
    return attrs


def parse_feature(line: str, line_no: Optional[int] = None) -> Feature:
    parts = line.rstrip("\r\n").split("\t")
    if len(parts) != 9:
        raise MalformedInputError(
            f"expected 9 columns, got {len(parts)}: {line.rstrip()!r}", line_no=line_no
        )
    seqid, source, type_, start, end, score, strand, phase, attrs = parts
    try:
        start_pos, end_pos = int(start), int(end)
    except ValueError as exc:
        raise MalformedInputError(f"non-integer coordinates {start!r}..{end!r}", line_no=line_no) from exc
    if start_pos > end_pos:
        raise MalformedInputError(f"start {start_pos} is after end {end_pos}", line_no=line_no)
    return Feature(
        seqid=seqid,
        source=source,
        type=type_,
        start=start_pos,
        end=end_pos,
        score=score,
        strand=strand,
        phase=phase,
        attributes=parse_attrs(attrs),
        raw_attributes=attrs,
    )


@dataclass
class LoadResult:
    """Everything the loader learned about one annotation file."""

    features: FeatureSet
    region_keys: Set[RegionKey] = field(default_factory=set)
    header: List[str] = field(default_factory=list)
    skipped: int = 0


def load_features(lines: Iterable[str], label: str = "") -> LoadResult:
    """Stream GFF3 lines and attach each feature to the open repeat_region.

    A feature is kept only when it lies inside the most recently opened
    repeat_region on the same sequence; anything else is skipped.
    """

    features = FeatureSet(label)
    result = LoadResult(features=features)
    current: Optional[RepeatRegion] = None
    in_header = True

    for line_no, line in enumerate(lines, start=1):
        if line.startswith(FASTA_DIRECTIVE):
            break
        if line.startswith("#"):
            if in_header:
                result.header.append(line.rstrip("\r\n"))
            continue
        if not line.strip():
            continue
        in_header = False
        feature = parse_feature(line, line_no)

        if feature.kind is FeatureType.REPEAT_REGION:
            region_id = feature.attr("id")
            if not region_id:
                raise MalformedInputError("repeat_region without an ID attribute", line_no=line_no)
            key = RegionKey(feature.seqid, region_id, feature.start, feature.end)
            if key in result.region_keys:
                raise MalformedInputError(f"duplicate repeat_region {key}", line_no=line_no)
            current = RepeatRegion(key=key, parent=feature)
            features.add(current)
            result.region_keys.add(key)
            continue

        if current is None or not current.parent.contains(feature):
            result.skipped += 1
            continue
        current.children.append(feature)

    logger.debug(
        "%s: %d repeat_region features, %d rows outside any region",
        label or "input",
        len(result.region_keys),
        result.skipped,
    )
    return result


def load_gff(gff_path: str, label: str = "") -> LoadResult:
    """Read a GFF3 file and group rows by repeat_region parent."""

    with open(gff_path, "r", encoding="utf-8") as handle:
        return load_features(handle, label or gff_path)
