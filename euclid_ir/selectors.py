"""Resolve element selectors against a construction state."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from .construction import get_all_circles, get_all_segments, get_element
from .intersections import select_candidate
from .types import (
    CircleRef,
    ConstructionState,
    ElementRef,
    ElementSelector,
    IntersectionAction,
    IntersectionCandidate,
    SegmentRef,
)

logger = logging.getLogger(__name__)


def resolve_selector(selector: ElementSelector, state: ConstructionState) -> Optional[str]:
    """Return the id of the element ``selector`` describes, or ``None``.

    ``None`` means the selector is not satisfiable yet, e.g. because the
    circle it names has not been drawn. Circle matching keeps center and
    radius point apart. Segments match in either endpoint order, and the
    earliest segment wins.
    """

    if isinstance(selector, ElementRef):
        return selector.id if get_element(state, selector.id) is not None else None
    if isinstance(selector, CircleRef):
        for circle in get_all_circles(state):
            if circle.center_id == selector.center_id and circle.radius_point_id == selector.radius_point_id:
                return circle.id
        return None
    if isinstance(selector, SegmentRef):
        wanted = {selector.from_id, selector.to_id}
        for segment in get_all_segments(state):
            if {segment.from_id, segment.to_id} == wanted:
                return segment.id
        return None
    raise TypeError(f"Unsupported selector: {selector!r}")


def selector_point_refs(selector: ElementSelector) -> List[Tuple[str, str]]:
    """``(field, point_id)`` pairs a selector mentions, in field order.

    Explicit ids only count when they name a point.
    """

    if isinstance(selector, CircleRef):
        return [("center_id", selector.center_id), ("radius_point_id", selector.radius_point_id)]
    if isinstance(selector, SegmentRef):
        return [("from_id", selector.from_id), ("to_id", selector.to_id)]
    if isinstance(selector, ElementRef) and selector.id.startswith("pt-"):
        return [("id", selector.id)]
    return []


def resolve_intersection_pair(
    expected: IntersectionAction, state: ConstructionState
) -> Optional[Tuple[Optional[str], Optional[str]]]:
    """Resolve both selectors of an intersection step.

    Returns ``(None, None)`` for a wildcard step and ``None`` when a declared
    selector cannot be resolved yet.
    """

    resolved = []
    for selector in (expected.of_a, expected.of_b):
        if selector is None:
            resolved.append(None)
            continue
        element_id = resolve_selector(selector, state)
        if element_id is None:
            return None
        resolved.append(element_id)
    if (resolved[0] is None) != (resolved[1] is None):
        return None
    return resolved[0], resolved[1]


def canonical_candidate(
    expected: IntersectionAction,
    state: ConstructionState,
    candidates: Sequence[IntersectionCandidate],
) -> Optional[IntersectionCandidate]:
    """The candidate an intersection step designates, if it exists yet."""

    pair = resolve_intersection_pair(expected, state)
    if pair is None:
        return None
    return select_candidate(candidates, pair[0], pair[1], expected.beyond_id, state)
