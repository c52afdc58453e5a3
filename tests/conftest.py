from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import pytest

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture(scope="session")
def primary_gff_path() -> Path:
    """Low-stringency (85%) miniature LTRdigest GFF3."""

    return DATA_DIR / "primary_85.gff3"


@pytest.fixture(scope="session")
def secondary_gff_path() -> Path:
    """High-stringency (99%) miniature LTRdigest GFF3."""

    return DATA_DIR / "secondary_99.gff3"


def region_lines(
    seqid: str,
    region_id: str,
    start: int,
    end: int,
    *,
    similarity: Optional[float] = 95.0,
    pbs: bool = False,
    ppt: bool = False,
    inverted_repeat: bool = False,
    domains: Sequence[str] = (),
    tsds: Tuple[int, ...] = (),
) -> List[str]:
    """GFF3 rows for one repeat_region with the requested evidence."""

    def row(type_: str, s: int, e: int, attrs: str) -> str:
        return "\t".join([seqid, "LTRharvest", type_, str(s), str(e), ".", "+", ".", attrs]) + "\n"

    ltr_id = f"LTR_{region_id}"
    lines = [row("repeat_region", start, end, f"ID={region_id}")]
    if tsds:
        lines.append(row("target_site_duplication", start, start + tsds[0] - 1, f"Parent={region_id}"))
    attrs = f"ID={ltr_id};Parent={region_id}"
    if similarity is not None:
        attrs += f";ltr_similarity={similarity:.2f}"
    lines.append(row("LTR_retrotransposon", start + 5, end - 5, attrs))
    if pbs:
        lines.append(row("primer_binding_site", start + 10, start + 22, f"Parent={ltr_id}"))
    if ppt:
        lines.append(row("RR_tract", end - 30, end - 16, f"Parent={ltr_id}"))
    if inverted_repeat:
        lines.append(row("inverted_repeat", start + 5, start + 6, f"Parent={ltr_id}"))
    for offset, name in enumerate(domains):
        s = start + 30 + offset * 10
        lines.append(row("protein_match", s, s + 8, f"Parent={ltr_id};name={name}"))
    for length in tsds[1:]:
        lines.append(row("target_site_duplication", end - length + 1, end, f"Parent={region_id}"))
    return lines


@pytest.fixture
def make_region():
    return region_lines
