"""TikZ renderer for construction states in Byrne colours."""

from __future__ import annotations

import logging
import math
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .utils import latex_escape_keep_math, statement_to_math
from ..construction import get_all_circles, get_all_points, get_all_segments, get_point, get_radius
from ..types import (
    ConstructionState,
    Coord,
    GhostCircle,
    GhostLayer,
    GhostPoint,
    GhostSegment,
    ProofFact,
)

logger = logging.getLogger(__name__)

TARGET_SPAN = 8.0
GHOST_OPACITY = 0.35

standalone_tpl = r"""\documentclass[border=2pt]{standalone}
\usepackage[utf8]{inputenc}
\usepackage{amssymb}
\usepackage{adjustbox}
\usepackage{xcolor}
\usepackage{tikz}
\tikzset{
  %% global sizes (scale-aware; override per scene if needed)
  gs/dot radius/.store in=\gsDotR,       gs/dot radius=1.6pt,
  gs/line width/.store in=\gsLW,         gs/line width=1.2pt,
  gs/aux width/.store  in=\gsLWaux,      gs/aux width=0.6pt,
  ptlabel/.style={font=\footnotesize, inner sep=1pt},
  carrier/.style={line width=\gsLW},
  circle/.style={line width=\gsLW},
  aux/.style={line width=\gsLWaux, dash pattern=on 3pt off 2pt},
  ghost/.style={opacity=%(ghost_opacity)s},
}
\begin{document}
\begin{minipage}[t]{\linewidth}
%(header)s
\begin{adjustbox}{max width=\linewidth, max totalheight=\textheight, keepaspectratio}
%(tikz)s
\end{adjustbox}
%(facts)s
\end{minipage}
\end{document}
"""

_CITATION_TEXT: Dict[str, str] = {
    "given": "Given",
    "def15": "Def.15",
    "cn1": "C.N.1",
    "cn3": "C.N.3",
    "cn3-angle": "C.N.3",
    "cn4": "C.N.4",
}


def generate_tikz_document(
    state: ConstructionState,
    facts: Sequence[ProofFact] = (),
    ghost_layers: Sequence[GhostLayer] = (),
    title: Optional[str] = None,
) -> str:
    """Render a standalone document with the figure and its proof facts."""

    header = ""
    if title:
        header = "\\noindent\\textbf{" + latex_escape_keep_math(title.strip()) + "}\\par\\vspace{4pt}\n"
    facts_block = ""
    if facts:
        rows = [
            f"  \\item {statement_to_math(fact.statement)} \\hfill ({_citation_text(fact)})"
            for fact in facts
        ]
        facts_block = "\\begin{enumerate}\n" + "\n".join(rows) + "\n\\end{enumerate}"
    tikz_code = generate_tikz_code(state, ghost_layers)
    return standalone_tpl % {
        "ghost_opacity": _format_float(GHOST_OPACITY),
        "header": header,
        "tikz": tikz_code,
        "facts": facts_block,
    }


def generate_tikz_code(state: ConstructionState, ghost_layers: Sequence[GhostLayer] = ()) -> str:
    """Emit a ``tikzpicture`` drawing every element of ``state``."""

    points = get_all_points(state)
    raw: List[Coord] = [point.coords for point in points]
    for layer in ghost_layers:
        raw.extend(_ghost_extent(layer))
    transform, scale = _normalizer(raw)

    colors = _ColorTable()
    lines: List[str] = ["\\begin{tikzpicture}"]
    body: List[str] = []

    for point in points:
        x, y = transform(point.coords)
        body.append(f"  \\coordinate ({point.label}) at ({_format_float(x)},{_format_float(y)});")

    for layer in sorted(ghost_layers, key=lambda item: (item.at_step, item.depth)):
        body.extend(_emit_ghost_layer(layer, transform, scale, colors))

    for circle in get_all_circles(state):
        center = get_point(state, circle.center_id)
        if center is None:
            continue
        radius = get_radius(state, circle.id) * scale
        body.append(
            f"  \\draw[circle, draw={colors.name(circle.color)}] ({center.label}) circle ({_format_float(radius)});"
        )

    for segment in get_all_segments(state):
        start = get_point(state, segment.from_id)
        end = get_point(state, segment.to_id)
        if start is None or end is None:
            continue
        body.append(f"  \\draw[carrier, draw={colors.name(segment.color)}] ({start.label}) -- ({end.label});")

    for point in points:
        anchor = _label_anchor(point.coords, raw)
        body.append(f"  \\fill[{colors.name(point.color)}] ({point.label}) circle (\\gsDotR);")
        body.append(f"  \\node[ptlabel, {anchor}] at ({point.label}) {{${point.label}$}};")

    lines.extend(colors.definitions())
    lines.extend(body)
    lines.append("\\end{tikzpicture}")
    logger.debug("Generated TikZ for %d point(s) and %d ghost layer(s)", len(points), len(ghost_layers))
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class _ColorTable:
    def __init__(self) -> None:
        self._names: Dict[str, str] = {}

    def name(self, hex_color: str) -> str:
        key = hex_color.lstrip("#").upper()
        if key not in self._names:
            self._names[key] = f"byrne{len(self._names)}"
        return self._names[key]

    def definitions(self) -> List[str]:
        return [f"  \\definecolor{{{name}}}{{HTML}}{{{key}}}" for key, name in self._names.items()]


def _normalizer(coords: Sequence[Coord]) -> Tuple[Callable[[Coord], Coord], float]:
    """Center ``coords`` on the origin and fit them into ``TARGET_SPAN``."""

    if not coords:
        return (lambda pt: (float(pt[0]), float(pt[1]))), 1.0
    arr = np.asarray(coords, dtype=float)
    lo = arr.min(axis=0)
    hi = arr.max(axis=0)
    span = max(float(np.max(hi - lo)), 1e-9)
    center = 0.5 * (lo + hi)
    scale = TARGET_SPAN / span

    def transform(pt: Coord) -> Coord:
        shifted = (np.asarray(pt, dtype=float) - center) * scale
        return float(shifted[0]), float(shifted[1])

    return transform, scale


def _ghost_extent(layer: GhostLayer) -> Iterable[Coord]:
    for element in layer.elements:
        if isinstance(element, GhostPoint):
            yield (element.x, element.y)
        elif isinstance(element, GhostSegment):
            yield (element.x1, element.y1)
            yield (element.x2, element.y2)
        elif isinstance(element, GhostCircle):
            yield (element.cx - element.r, element.cy - element.r)
            yield (element.cx + element.r, element.cy + element.r)


def _emit_ghost_layer(
    layer: GhostLayer,
    transform: Callable[[Coord], Coord],
    scale: float,
    colors: _ColorTable,
) -> List[str]:
    out = [f"  % I.{layer.prop_id} ghost (depth {layer.depth}, step {layer.at_step})", "  \\begin{scope}[ghost]"]
    for element in layer.elements:
        if isinstance(element, GhostCircle):
            cx, cy = transform((element.cx, element.cy))
            out.append(
                f"    \\draw[aux, draw={colors.name(element.color)}] "
                f"({_format_float(cx)},{_format_float(cy)}) circle ({_format_float(element.r * scale)});"
            )
        elif isinstance(element, GhostSegment):
            x1, y1 = transform((element.x1, element.y1))
            x2, y2 = transform((element.x2, element.y2))
            style = "aux" if element.is_production else "carrier"
            out.append(
                f"    \\draw[{style}, draw={colors.name(element.color)}] "
                f"({_format_float(x1)},{_format_float(y1)}) -- ({_format_float(x2)},{_format_float(y2)});"
            )
        elif isinstance(element, GhostPoint):
            x, y = transform((element.x, element.y))
            out.append(
                f"    \\fill[{colors.name(element.color)}] ({_format_float(x)},{_format_float(y)}) circle (\\gsDotR);"
            )
    out.append("  \\end{scope}")
    return out


def _label_anchor(point: Coord, coords: Sequence[Coord]) -> str:
    """Place the label away from the centroid of the figure."""

    if not coords:
        return "above"
    centroid = np.asarray(coords, dtype=float).mean(axis=0)
    dx = point[0] - float(centroid[0])
    dy = point[1] - float(centroid[1])
    if math.hypot(dx, dy) <= 1e-9:
        return "above"
    vertical = "above" if dy >= 0 else "below"
    if abs(dx) < 0.4 * abs(dy):
        return vertical
    horizontal = "right" if dx > 0 else "left"
    if abs(dy) < 0.4 * abs(dx):
        return horizontal
    return f"{vertical} {horizontal}"


def _citation_text(fact: ProofFact) -> str:
    citation = fact.citation
    if citation.type == "prop":
        return f"I.{citation.prop_id}"
    return _CITATION_TEXT.get(citation.type, citation.type)


def _format_float(value: float) -> str:
    if math.isnan(value) or math.isinf(value):
        raise ValueError("Cannot format non-finite float for TikZ output")
    formatted = f"{value:.4f}"
    formatted = formatted.rstrip("0").rstrip(".")
    if formatted in ("", "-0"):
        return "0"
    return formatted

