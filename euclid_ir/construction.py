"""Append-only construction store.

Every mutation returns a new :class:`ConstructionState` together with the
element it added; elements are never removed or edited in place.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import replace
from typing import Iterable, List, Optional, Tuple

from .logging_utils import apply_debug_logging
from .types import (
    BYRNE,
    BYRNE_CYCLE,
    Circle,
    ConstructionElement,
    ConstructionState,
    ElementOrigin,
    Point,
    Segment,
    SegmentOrigin,
)

logger = logging.getLogger(__name__)

LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
_LABEL_RE = re.compile(r"^([A-Z])([0-9]*)$")


def label_at(index: int) -> str:
    """Return the ``index``-th label of the sequence ``A..Z, A2..Z2, A3..``."""

    if index < 0:
        raise ValueError("label index must be non-negative")
    letter = LETTERS[index % len(LETTERS)]
    cycle = index // len(LETTERS)
    if cycle == 0:
        return letter
    return f"{letter}{cycle + 1}"


def label_index(label: str) -> Optional[int]:
    match = _LABEL_RE.match(label)
    if match is None:
        return None
    letter, suffix = match.groups()
    cycle = int(suffix) - 1 if suffix else 0
    if cycle < 0 or suffix == "1":
        return None
    return cycle * len(LETTERS) + LETTERS.index(letter)


def create_initial_state() -> ConstructionState:
    return ConstructionState()


def initialize_given(given_elements: Iterable[ConstructionElement]) -> ConstructionState:
    elements = tuple(given_elements)
    next_label = 0
    for element in elements:
        if isinstance(element, Point):
            idx = label_index(element.label)
            if idx is not None:
                next_label = max(next_label, idx + 1)
    return ConstructionState(elements=elements, next_label_index=next_label, next_color_index=0)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def get_element(state: ConstructionState, element_id: str) -> Optional[ConstructionElement]:
    for element in state.elements:
        if element.id == element_id:
            return element
    return None


def get_point(state: ConstructionState, point_id: str) -> Optional[Point]:
    element = get_element(state, point_id)
    return element if isinstance(element, Point) else None


def get_circle(state: ConstructionState, circle_id: str) -> Optional[Circle]:
    element = get_element(state, circle_id)
    return element if isinstance(element, Circle) else None


def get_point_by_label(state: ConstructionState, label: str) -> Optional[Point]:
    for element in state.elements:
        if isinstance(element, Point) and element.label == label:
            return element
    return None


def get_segment(state: ConstructionState, segment_id: str) -> Optional[Segment]:
    element = get_element(state, segment_id)
    return element if isinstance(element, Segment) else None


def get_all_points(state: ConstructionState) -> List[Point]:
    return [element for element in state.elements if isinstance(element, Point)]


def get_all_circles(state: ConstructionState) -> List[Circle]:
    return [element for element in state.elements if isinstance(element, Circle)]


def get_all_segments(state: ConstructionState) -> List[Segment]:
    return [element for element in state.elements if isinstance(element, Segment)]


def get_radius(state: ConstructionState, circle_id: str) -> float:
    """Radius of ``circle_id`` from the current point positions (0.0 if unknown)."""

    circle = get_circle(state, circle_id)
    if circle is None:
        return 0.0
    center = get_point(state, circle.center_id)
    rim = get_point(state, circle.radius_point_id)
    if center is None or rim is None:
        return 0.0
    return math.hypot(rim.x - center.x, rim.y - center.y)


def distance_between(state: ConstructionState, a_id: str, b_id: str) -> Optional[float]:
    a = get_point(state, a_id)
    b = get_point(state, b_id)
    if a is None or b is None:
        return None
    return math.hypot(b.x - a.x, b.y - a.y)


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


def _used_labels(state: ConstructionState) -> set:
    return {element.label for element in state.elements if isinstance(element, Point)}


def _unique_id(state: ConstructionState, base: str) -> str:
    taken = {element.id for element in state.elements}
    if base not in taken:
        return base
    suffix = 2
    while f"{base}-{suffix}" in taken:
        suffix += 1
    return f"{base}-{suffix}"


def _next_free_label(state: ConstructionState) -> Tuple[str, int]:
    used = _used_labels(state)
    index = state.next_label_index
    while label_at(index) in used:
        index += 1
    return label_at(index), index


def _color_for(state: ConstructionState, origin: str) -> str:
    if origin == "given":
        return BYRNE.given
    return BYRNE_CYCLE[state.next_color_index % len(BYRNE_CYCLE)]


def add_point(
    state: ConstructionState,
    x: float,
    y: float,
    origin: ElementOrigin,
    label: Optional[str] = None,
) -> Tuple[ConstructionState, Point]:
    if label is None:
        label, index = _next_free_label(state)
        next_label = index + 1
    else:
        index = label_index(label)
        next_label = state.next_label_index if index is None else max(state.next_label_index, index + 1)

    point = Point(
        id=_unique_id(state, f"pt-{label}"),
        x=float(x),
        y=float(y),
        label=label,
        color=_color_for(state, origin),
        origin=origin,
    )
    next_color = state.next_color_index if origin == "given" else state.next_color_index + 1
    new_state = ConstructionState(
        elements=state.elements + (point,),
        next_label_index=next_label,
        next_color_index=next_color,
    )
    return new_state, point


def add_circle(
    state: ConstructionState, center_id: str, radius_point_id: str
) -> Tuple[ConstructionState, Circle]:
    count = len(get_all_circles(state))
    circle = Circle(
        id=_unique_id(state, f"cir-{count + 1}"),
        center_id=center_id,
        radius_point_id=radius_point_id,
        color=_color_for(state, "compass"),
    )
    new_state = replace(
        state,
        elements=state.elements + (circle,),
        next_color_index=state.next_color_index + 1,
    )
    return new_state, circle


def add_segment(
    state: ConstructionState,
    from_id: str,
    to_id: str,
    origin: SegmentOrigin = "straightedge",
) -> Tuple[ConstructionState, Segment]:
    count = len(get_all_segments(state))
    segment = Segment(
        id=_unique_id(state, f"seg-{count + 1}"),
        from_id=from_id,
        to_id=to_id,
        color=_color_for(state, origin),
        origin=origin,
    )
    next_color = state.next_color_index if origin == "given" else state.next_color_index + 1
    new_state = replace(state, elements=state.elements + (segment,), next_color_index=next_color)
    return new_state, segment


def skip_point_label(state: ConstructionState, label: Optional[str] = None) -> ConstructionState:
    """Consume a label and a color slot without adding a point."""

    if label is not None:
        index = label_index(label)
        next_label = state.next_label_index if index is None else max(state.next_label_index, index + 1)
    else:
        next_label = state.next_label_index + 1
    return replace(state, next_label_index=next_label, next_color_index=state.next_color_index + 1)


apply_debug_logging(globals(), logger=logger, skip={"label_at", "label_index", "get_element", "get_point"})
