"""SVG postcards of resolved overlap groups, built on svgwrite."""

from __future__ import annotations

from typing import Dict

import svgwrite

from .resolver import Resolution

PALETTES: Dict[str, Dict[str, str]] = {
    "classic": {
        "WINNER": "#4E79A7",
        "LOSER": "#BAB0AC",
        "TEXT": "#111111",
        "BG": "#FFFFFF",
    },
    "mono": {
        "WINNER": "#333333",
        "LOSER": "#BBBBBB",
        "TEXT": "#000000",
        "BG": "#FFFFFF",
    },
    "protanopia": {
        "WINNER": "#0072B2",
        "LOSER": "#CCCCCC",
        "TEXT": "#111111",
        "BG": "#FFFFFF",
    },
}


def _scale(pos: int, start: int, end: int, width: float) -> float:
    span = max(1, end - start)
    return (pos - start) / span * width


def svg_group(
    resolution: Resolution,
    *,
    width: int = 800,
    row_height: int = 28,
    palette: str = "classic",
) -> svgwrite.Drawing:
    colors = PALETTES.get(palette, PALETTES["classic"])
    pad_x = 12
    top = 30
    body_width = width - 2 * pad_x
    keys = list(resolution.candidates)
    height = top + row_height * len(keys) + 20
    span_start = min(key.start for key in keys)
    span_end = max(key.end for key in keys)

    dwg = svgwrite.Drawing(size=(width, height))
    dwg.add(dwg.rect(insert=(0, 0), size=(width, height), fill=colors["BG"]))
    dwg.add(
        dwg.text(
            f"{resolution.seqid}:{span_start}-{span_end}  winner:{resolution.winner.region_id}  "
            f"mode:{resolution.mode}",
            insert=(pad_x, 18),
            font_size=12,
            fill=colors["TEXT"],
        )
    )

    for row, key in enumerate(keys):
        y = top + row * row_height
        x1 = pad_x + _scale(key.start, span_start, span_end, body_width)
        x2 = pad_x + _scale(key.end, span_start, span_end, body_width)
        fill = colors["WINNER"] if key == resolution.winner else colors["LOSER"]
        dwg.add(dwg.rect(insert=(x1, y), size=(max(1.0, x2 - x1), row_height - 14), rx=3, ry=3, fill=fill))
        dwg.add(
            dwg.text(
                f"{resolution.origins.get(key, '')}:{key.region_id}  score:{resolution.scores[key]}  "
                f"sim:{resolution.similarities[key]:g}",
                insert=(x1, y + row_height - 3),
                font_size=10,
                fill=colors["TEXT"],
            )
        )

    dwg.add(dwg.text(str(span_start), insert=(pad_x, height - 4), font_size=10, fill=colors["TEXT"]))
    end_text = dwg.text(str(span_end), insert=(width - pad_x, height - 4), font_size=10, fill=colors["TEXT"])
    end_text.attribs["text-anchor"] = "end"
    dwg.add(end_text)
    return dwg
