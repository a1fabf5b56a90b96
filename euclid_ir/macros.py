"""Closed-form macros for previously proven propositions.

A macro applies the effect of a construction proposition to points of the
caller's construction without replaying its individual steps. Each macro
computes its output analytically, adds the resulting elements and records
the facts the proposition guarantees. Ghost geometry for a macro is computed
separately by :mod:`euclid_ir.ghost`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from math import hypot
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .config import get_engine_config
from .construction import add_point, add_segment, get_point
from .facts import FactStore, add_fact, distance_pair, format_distance
from .intersections import circle_circle_intersections, find_new_intersections, remove_candidates_at
from .logging_utils import apply_debug_logging
from .types import (
    ConstructionElement,
    ConstructionState,
    Coord,
    GhostLayer,
    IntersectionCandidate,
    Point,
    PropCitation,
    ProofFact,
)

logger = logging.getLogger(__name__)


@dataclass
class MacroResult:
    state: ConstructionState
    candidates: List[IntersectionCandidate]
    added_elements: List[ConstructionElement] = field(default_factory=list)
    new_facts: List[ProofFact] = field(default_factory=list)
    ghost_layers: List[GhostLayer] = field(default_factory=list)


MacroFn = Callable[..., MacroResult]


@dataclass(frozen=True)
class MacroDef:
    prop_id: int
    label: str
    input_labels: Tuple[str, ...]
    input_to_given_ids: Tuple[str, ...]
    output_keys: Tuple[str, ...]
    execute: MacroFn


def _empty_result(state: ConstructionState, candidates: Sequence[IntersectionCandidate]) -> MacroResult:
    return MacroResult(state=state, candidates=list(candidates))


def _resolve_inputs(state: ConstructionState, input_ids: Sequence[str], count: int) -> Optional[List[Point]]:
    if len(input_ids) < count:
        return None
    points = [get_point(state, point_id) for point_id in input_ids[:count]]
    if any(point is None for point in points):
        return None
    return points  # type: ignore[return-value]


def _unit_or_up(origin: Coord, toward: Coord) -> Coord:
    dx = toward[0] - origin[0]
    dy = toward[1] - origin[1]
    length = hypot(dx, dy)
    if length < get_engine_config().degenerate_length:
        return (0.0, 1.0)
    return (dx / length, dy / length)


class _Builder:
    """Accumulates the elements, candidates and facts of one macro run."""

    def __init__(
        self,
        state: ConstructionState,
        candidates: Sequence[IntersectionCandidate],
        store: FactStore,
        at_step: int,
        extend_segments: bool,
    ) -> None:
        self.state = state
        self.candidates = list(candidates)
        self.store = store
        self.at_step = at_step
        self.extend_segments = extend_segments
        self.added: List[ConstructionElement] = []
        self.facts: List[ProofFact] = []

    def point(self, coords: Coord, label: Optional[str]) -> Point:
        self.state, point = add_point(self.state, coords[0], coords[1], "intersection", label)
        self.candidates = remove_candidates_at(self.candidates, point.x, point.y)
        self.added.append(point)
        return point

    def segment(self, from_id: str, to_id: str) -> None:
        self.state, segment = add_segment(self.state, from_id, to_id)
        self.candidates.extend(
            find_new_intersections(self.state, segment, self.candidates, self.extend_segments)
        )
        self.added.append(segment)

    def absorb(self, earlier: MacroResult) -> None:
        self.state = earlier.state
        self.candidates = list(earlier.candidates)
        self.added.extend(earlier.added_elements)
        self.facts.extend(earlier.new_facts)

    def fact(self, left: Tuple[str, str], right: Tuple[str, str], prop_id: int, justification: str) -> None:
        lhs = distance_pair(*left)
        rhs = distance_pair(*right)
        statement = f"{format_distance(lhs, self.state)} = {format_distance(rhs, self.state)}"
        self.facts.extend(
            add_fact(self.store, lhs, rhs, PropCitation(prop_id), statement, self.at_step, justification)
        )

    def result(self) -> MacroResult:
        return MacroResult(
            state=self.state,
            candidates=self.candidates,
            added_elements=self.added,
            new_facts=self.facts,
        )


def _output_label(output_labels: Optional[Mapping[str, str]], key: str) -> Optional[str]:
    if not output_labels:
        return None
    return output_labels.get(key)


def execute_prop1(
    state: ConstructionState,
    input_ids: Sequence[str],
    candidates: Sequence[IntersectionCandidate],
    store: FactStore,
    at_step: int,
    extend_segments: bool = False,
    output_labels: Optional[Mapping[str, str]] = None,
) -> MacroResult:
    """I.1: equilateral triangle on ``[A, B]``; the apex is the upper intersection."""

    points = _resolve_inputs(state, input_ids, 2)
    if points is None:
        return _empty_result(state, candidates)
    a, b = points
    radius = hypot(b.x - a.x, b.y - a.y)
    solutions = circle_circle_intersections(a.coords, radius, b.coords, radius)
    if not solutions:
        return _empty_result(state, candidates)
    apex_coords = max(solutions, key=lambda pt: pt[1])

    builder = _Builder(state, candidates, store, at_step, extend_segments)
    apex = builder.point(apex_coords, _output_label(output_labels, "apex"))
    builder.segment(apex.id, a.id)
    builder.segment(apex.id, b.id)
    builder.fact((a.id, apex.id), (a.id, b.id), 1, "I.1: the triangle on AB is equilateral")
    builder.fact((b.id, apex.id), (b.id, a.id), 1, "I.1: the triangle on AB is equilateral")
    return builder.result()


def execute_prop2(
    state: ConstructionState,
    input_ids: Sequence[str],
    candidates: Sequence[IntersectionCandidate],
    store: FactStore,
    at_step: int,
    extend_segments: bool = False,
    output_labels: Optional[Mapping[str, str]] = None,
) -> MacroResult:
    """I.2: place at ``target`` a line equal to ``seg_from``-``seg_to``.

    The new point lies on the ray from ``target`` through ``seg_from``, or
    straight up when the two coincide.
    """

    points = _resolve_inputs(state, input_ids, 3)
    if points is None:
        return _empty_result(state, candidates)
    target, seg_from, seg_to = points
    length = hypot(seg_to.x - seg_from.x, seg_to.y - seg_from.y)
    ux, uy = _unit_or_up(target.coords, seg_from.coords)

    builder = _Builder(state, candidates, store, at_step, extend_segments)
    result = builder.point((target.x + length * ux, target.y + length * uy), _output_label(output_labels, "result"))
    builder.segment(target.id, result.id)
    builder.fact((target.id, result.id), (seg_from.id, seg_to.id), 2, "I.2: a line equal to a given line")
    return builder.result()


def execute_prop3(
    state: ConstructionState,
    input_ids: Sequence[str],
    candidates: Sequence[IntersectionCandidate],
    store: FactStore,
    at_step: int,
    extend_segments: bool = False,
    output_labels: Optional[Mapping[str, str]] = None,
) -> MacroResult:
    """I.3: cut off from ``cut``-``target`` a length equal to ``seg_from``-``seg_to``.

    Unless ``cut`` already coincides with ``seg_from``, the less line is first
    transferred to ``cut`` with I.2, and that point, segment and fact become
    part of the result. An explicit ``transfer`` label names the transferred
    point so it cannot claim the label meant for ``result``.
    """

    points = _resolve_inputs(state, input_ids, 4)
    if points is None:
        return _empty_result(state, candidates)
    cut, target, seg_from, seg_to = points
    length = hypot(seg_to.x - seg_from.x, seg_to.y - seg_from.y)
    ux, uy = _unit_or_up(cut.coords, target.coords)

    transfer_label = _output_label(output_labels, "transfer")
    builder = _Builder(state, candidates, store, at_step, extend_segments)
    if hypot(cut.x - seg_from.x, cut.y - seg_from.y) >= get_engine_config().degenerate_length:
        builder.absorb(
            execute_prop2(
                state,
                (cut.id, seg_from.id, seg_to.id),
                candidates,
                store,
                at_step,
                extend_segments,
                {"result": transfer_label} if transfer_label else None,
            )
        )
    result = builder.point((cut.x + length * ux, cut.y + length * uy), _output_label(output_labels, "result"))
    builder.fact((cut.id, result.id), (seg_from.id, seg_to.id), 3, "I.3: cut off a length equal to the less")
    return builder.result()


MACRO_REGISTRY: Dict[int, MacroDef] = {
    1: MacroDef(
        prop_id=1,
        label="I.1",
        input_labels=("First endpoint", "Second endpoint"),
        input_to_given_ids=("pt-A", "pt-B"),
        output_keys=("apex",),
        execute=execute_prop1,
    ),
    2: MacroDef(
        prop_id=2,
        label="I.2",
        input_labels=("Target point", "Segment start", "Segment end"),
        input_to_given_ids=("pt-A", "pt-B", "pt-C"),
        output_keys=("result",),
        execute=execute_prop2,
    ),
    3: MacroDef(
        prop_id=3,
        label="I.3",
        input_labels=("Start of greater", "End of greater", "Start of less", "End of less"),
        input_to_given_ids=("pt-A", "pt-B", "pt-C", "pt-D"),
        output_keys=("result", "transfer"),
        execute=execute_prop3,
    ),
}


apply_debug_logging(globals(), logger=logger, skip={"_unit_or_up", "_output_label"})
