"""TSV reports of resolution decisions and filtered regions."""

from __future__ import annotations

from typing import Iterable, TextIO

from .filters import FilteredRegion
from .resolver import Resolution

RESOLUTION_HEADER = [
    "seqid",
    "query",
    "candidates",
    "origins",
    "scores",
    "similarities",
    "winner",
    "mode",
]

FILTERED_HEADER = [
    "seqid",
    "region_id",
    "start",
    "end",
    "length_bp",
    "reasons",
]


def write_resolution_summary(rows: Iterable[Resolution], handle: TextIO) -> None:
    handle.write("\t".join(RESOLUTION_HEADER) + "\n")
    for row in rows:
        handle.write(
            "\t".join(
                [
                    row.seqid,
                    str(row.query),
                    ",".join(str(key) for key in row.candidates),
                    ",".join(row.origins[key] for key in row.candidates),
                    ",".join(str(row.scores[key]) for key in row.candidates),
                    ",".join(f"{row.similarities[key]:g}" for key in row.candidates),
                    str(row.winner),
                    row.mode,
                ]
            )
            + "\n"
        )


def write_filtered_summary(rows: Iterable[FilteredRegion], handle: TextIO) -> None:
    handle.write("\t".join(FILTERED_HEADER) + "\n")
    for row in rows:
        handle.write(
            "\t".join(
                [
                    row.key.seqid,
                    row.key.region_id,
                    str(row.key.start),
                    str(row.key.end),
                    str(row.key.length),
                    ",".join(row.reasons),
                ]
            )
            + "\n"
        )
