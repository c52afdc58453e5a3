"""Sorted GFF3 output of the reconciled annotation."""

from __future__ import annotations

from typing import Iterable, Iterator, List, Mapping, TextIO

from natsort import natsorted

from .model import Feature, RegionKey, RepeatRegion, region_sort_key


def normalize_attributes(attr_str: str) -> str:
    """Rewrite an attribute column as ``key=value`` pairs joined by ``;``.

    Quote characters are dropped, whitespace around separators and at the end
    is removed, and a missing ``=`` between key and value is inserted. Empty
    segments, such as the one left by a trailing ``;``, are dropped.
    """

    parts = []
    for part in attr_str.replace('"', "").split(";"):
        part = part.strip()
        if not part:
            continue
        if "=" not in part and " " in part:
            key, value = part.split(None, 1)
            part = f"{key}={value.strip()}"
        parts.append(part)
    return ";".join(parts)


def format_feature(feature: Feature) -> str:
    columns = feature.columns()
    columns[8] = normalize_attributes(columns[8])
    return "\t".join(columns)


def iter_regions(merged: Mapping[str, Mapping[RegionKey, RepeatRegion]]) -> Iterator[RepeatRegion]:
    for seqid in natsorted(merged):
        bucket = merged[seqid]
        for key in sorted(bucket, key=region_sort_key):
            yield bucket[key]


def iter_gff_lines(merged: Mapping[str, Mapping[RegionKey, RepeatRegion]]) -> Iterator[str]:
    for region in iter_regions(merged):
        yield format_feature(region.parent)
        for child in region.children:
            yield format_feature(child)


def write_gff(
    merged: Mapping[str, Mapping[RegionKey, RepeatRegion]],
    header: Iterable[str],
    handle: TextIO,
) -> int:
    """Write the header unchanged followed by the sorted feature lines.

    Returns the number of feature lines written.
    """

    for line in header:
        handle.write(line + "\n")
    count = 0
    for line in iter_gff_lines(merged):
        handle.write(line + "\n")
        count += 1
    return count


def render_gff(merged: Mapping[str, Mapping[RegionKey, RepeatRegion]], header: Iterable[str] = ()) -> List[str]:
    lines = list(header)
    lines.extend(iter_gff_lines(merged))
    return lines
