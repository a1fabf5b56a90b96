"""Ghost geometry for macro invocations.

A macro's numeric result comes from a closed form (:mod:`euclid_ir.macros`).
What the user should *see* is the construction the macro stands for, so this
module replays the macro proposition's own steps in a scratch state seeded
with the caller's input positions and turns everything drawn there into ghost
elements. Nested macros recurse one level deeper. Nothing produced here ever
reaches the caller's construction state or fact store.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, List, Sequence

from .construction import (
    add_circle,
    add_point,
    add_segment,
    get_element,
    get_point,
    get_radius,
    initialize_given,
    skip_point_label,
)
from .facts import create_fact_store
from .intersections import find_new_intersections, production_point, remove_candidates_at
from .logging_utils import apply_debug_logging
from .macros import MACRO_REGISTRY
from .propositions import PROP_REGISTRY
from .selectors import canonical_candidate
from .types import (
    CompassAction,
    ConstructionState,
    Coord,
    ExtendAction,
    GhostCircle,
    GhostElement,
    GhostLayer,
    GhostPoint,
    GhostSegment,
    IntersectionAction,
    IntersectionCandidate,
    MacroAction,
    Point,
    Segment,
    StraightedgeAction,
    needs_extended_segments,
)

logger = logging.getLogger(__name__)

_PRODUCTION_COLOR = "#888888"


def _segment_color(state: ConstructionState, element_ids: Sequence[str]) -> str:
    for element_id in element_ids:
        element = get_element(state, element_id)
        if isinstance(element, Segment):
            return element.color
    return _PRODUCTION_COLOR


def compute_macro_ghost(
    prop_id: int,
    input_ids: Sequence[str],
    parent_state: ConstructionState,
    at_step: int,
    depth: int = 1,
) -> List[GhostLayer]:
    """Replay proposition ``prop_id`` on the caller's inputs as ghost layers.

    Returns one layer at ``depth`` followed by the layers of any nested
    macros, or ``[]`` when ``prop_id`` is not a registered macro.
    """

    prop = PROP_REGISTRY.get(prop_id)
    macro = MACRO_REGISTRY.get(prop_id)
    if prop is None or macro is None:
        return []

    positions: Dict[str, Coord] = {}
    for given_id, input_id in zip(macro.input_to_given_ids, input_ids):
        point = get_point(parent_state, input_id)
        if point is not None:
            positions[given_id] = point.coords

    given = [
        replace(element, x=positions[element.id][0], y=positions[element.id][1])
        if isinstance(element, Point) and element.id in positions
        else element
        for element in prop.given_elements
    ]

    state = initialize_given(given)
    candidates: List[IntersectionCandidate] = []
    scratch_facts = create_fact_store()
    extend = needs_extended_segments(prop)
    ghosts: List[GhostElement] = []
    children: List[GhostLayer] = []

    for step in prop.steps:
        expected = step.expected
        if isinstance(expected, StraightedgeAction):
            state, segment = add_segment(state, expected.from_id, expected.to_id)
            candidates.extend(find_new_intersections(state, segment, candidates, extend))
            start = get_point(state, expected.from_id)
            end = get_point(state, expected.to_id)
            if start is not None and end is not None:
                ghosts.append(GhostSegment(start.x, start.y, end.x, end.y, segment.color))
        elif isinstance(expected, CompassAction):
            state, circle = add_circle(state, expected.center_id, expected.radius_point_id)
            candidates.extend(find_new_intersections(state, circle, candidates, extend))
            center = get_point(state, expected.center_id)
            if center is not None:
                ghosts.append(GhostCircle(center.x, center.y, get_radius(state, circle.id), circle.color))
        elif isinstance(expected, IntersectionAction):
            chosen = canonical_candidate(expected, state, candidates)
            if chosen is None:
                state = skip_point_label(state, expected.label)
                continue
            state, point = add_point(state, chosen.x, chosen.y, "intersection", expected.label)
            candidates = remove_candidates_at(candidates, chosen.x, chosen.y)
            ghosts.append(GhostPoint(point.x, point.y, point.label, point.color))
            beyond = get_point(state, expected.beyond_id) if expected.beyond_id else None
            if beyond is not None:
                ghosts.append(
                    GhostSegment(
                        beyond.x,
                        beyond.y,
                        chosen.x,
                        chosen.y,
                        _segment_color(state, (chosen.of_a, chosen.of_b)),
                        is_production=True,
                    )
                )
        elif isinstance(expected, MacroAction):
            inner = MACRO_REGISTRY.get(expected.prop_id)
            if inner is None:
                continue
            before = state
            result = inner.execute(
                state,
                expected.input_point_ids,
                candidates,
                scratch_facts,
                at_step,
                extend,
                expected.output_labels,
            )
            state = result.state
            candidates = result.candidates
            for element in result.added_elements:
                if isinstance(element, Point):
                    ghosts.append(GhostPoint(element.x, element.y, element.label, element.color))
                elif isinstance(element, Segment):
                    start = get_point(state, element.from_id)
                    end = get_point(state, element.to_id)
                    if start is not None and end is not None:
                        ghosts.append(GhostSegment(start.x, start.y, end.x, end.y, element.color))
            children.extend(
                compute_macro_ghost(expected.prop_id, expected.input_point_ids, before, at_step, depth + 1)
            )
        elif isinstance(expected, ExtendAction):
            coords = production_point(state, expected.base_id, expected.through_id, expected.distance)
            if coords is None:
                state = skip_point_label(state, expected.label)
                continue
            through = get_point(state, expected.through_id)
            state, point = add_point(state, coords[0], coords[1], "straightedge", expected.label)
            ghosts.append(GhostSegment(through.x, through.y, point.x, point.y, point.color, is_production=True))
            ghosts.append(GhostPoint(point.x, point.y, point.label, point.color))

    logger.debug("Ghost replay of I.%d at depth %d drew %d element(s)", prop_id, depth, len(ghosts))
    return [GhostLayer(prop_id=prop_id, depth=depth, at_step=at_step, elements=tuple(ghosts))] + children


apply_debug_logging(globals(), logger=logger, skip={"_segment_color"})
