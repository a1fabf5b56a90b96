"""Static checks on authored propositions and structural step matching.

Authoring mistakes (dangling or forward point references) are collected as
:class:`ValidationError` records; runtime actions are matched against the
expected step by :func:`validate_step`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

from .config import get_engine_config
from .intersections import production_point
from .selectors import resolve_intersection_pair, selector_point_refs
from .types import (
    Circle,
    CompassAction,
    ConstructionElement,
    ConstructionState,
    ExpectedAction,
    ExtendAction,
    IntersectionAction,
    IntersectionCandidate,
    MacroAction,
    Point,
    PropositionDef,
    Segment,
    StraightedgeAction,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationError:
    """A point reference that is not known where it is used."""

    step_index: Optional[int]
    point_id: str
    field: str

    @property
    def message(self) -> str:
        where = "definition" if self.step_index is None else f"step {self.step_index}"
        return f"[{where}] {self.field} references unknown point {self.point_id}"


class PropositionDefinitionError(Exception):
    def __init__(self, prop_id: int, errors: List[ValidationError]):
        self.prop_id = prop_id
        self.errors = errors
        details = "; ".join(error.message for error in errors)
        super().__init__(f"Proposition I.{prop_id} is inconsistent: {details}")


def _point_id(label: str) -> str:
    return f"pt-{label}"


def _expected_references(expected: ExpectedAction) -> List[Tuple[str, str]]:
    """``(field, point_id)`` pairs in field order."""

    if isinstance(expected, CompassAction):
        return [("center_id", expected.center_id), ("radius_point_id", expected.radius_point_id)]
    if isinstance(expected, StraightedgeAction):
        return [("from_id", expected.from_id), ("to_id", expected.to_id)]
    if isinstance(expected, IntersectionAction):
        refs = []
        for name, selector in (("of_a", expected.of_a), ("of_b", expected.of_b)):
            if selector is None:
                continue
            for field_name, point_id in selector_point_refs(selector):
                refs.append((f"{name}.{field_name}", point_id))
        if expected.beyond_id is not None:
            refs.append(("beyond_id", expected.beyond_id))
        return refs
    if isinstance(expected, MacroAction):
        return [("input_point_ids", point_id) for point_id in expected.input_point_ids]
    if isinstance(expected, ExtendAction):
        return [("base_id", expected.base_id), ("through_id", expected.through_id)]
    return []


def _introduced_points(expected: ExpectedAction) -> List[str]:
    if isinstance(expected, (IntersectionAction, ExtendAction)) and expected.label:
        return [_point_id(expected.label)]
    if isinstance(expected, MacroAction) and expected.output_labels:
        return [_point_id(label) for label in expected.output_labels.values()]
    return []


def _validate_given_elements(prop: PropositionDef, errors: List[ValidationError]) -> Set[str]:
    known = {element.id for element in prop.given_elements if isinstance(element, Point)}
    for element in prop.given_elements:
        if isinstance(element, Segment):
            refs = [("given_elements.from_id", element.from_id), ("given_elements.to_id", element.to_id)]
        elif isinstance(element, Circle):
            refs = [
                ("given_elements.center_id", element.center_id),
                ("given_elements.radius_point_id", element.radius_point_id),
            ]
        else:
            continue
        for field_name, point_id in refs:
            if point_id not in known:
                errors.append(ValidationError(None, point_id, field_name))
    for fact in prop.given_facts:
        for pair in (fact.left, fact.right):
            for point_id in (pair.a, pair.b):
                if point_id not in known:
                    errors.append(ValidationError(None, point_id, "given_facts"))
    for fact in prop.given_angle_facts:
        for angle in (fact.left, fact.right):
            for point_id in (angle.vertex, angle.ray1_end, angle.ray2_end):
                if point_id not in known:
                    errors.append(ValidationError(None, point_id, "given_angle_facts"))
    return known


def validate_proposition_def(prop: PropositionDef) -> List[ValidationError]:
    """Collect every dangling or forward point reference in ``prop``.

    Points introduced by a step (an intersection or extend label, or a
    macro's output labels) become known only for the steps after it.
    """

    errors: List[ValidationError] = []
    known = _validate_given_elements(prop, errors)

    for index, step in enumerate(prop.steps):
        for field_name, point_id in _expected_references(step.expected):
            if point_id not in known:
                errors.append(ValidationError(index, point_id, field_name))
        for point_id in step.highlight_ids:
            if point_id not in known:
                errors.append(ValidationError(index, point_id, "highlight_ids"))
        known.update(_introduced_points(step.expected))

    for segment in prop.result_segments:
        for field_name, point_id in (("result_segments.from_id", segment.from_id), ("result_segments.to_id", segment.to_id)):
            if point_id not in known:
                errors.append(ValidationError(None, point_id, field_name))

    if errors:
        logger.debug("Proposition I.%d has %d reference error(s)", prop.id, len(errors))
    return errors


def check_proposition_def(prop: PropositionDef) -> None:
    errors = validate_proposition_def(prop)
    if errors:
        raise PropositionDefinitionError(prop.id, errors)


def validate_step(
    expected: ExpectedAction,
    state: ConstructionState,
    element: ConstructionElement,
    candidate: Optional[IntersectionCandidate] = None,
) -> bool:
    """Does ``element`` (just committed) structurally satisfy ``expected``?

    Compass matches exactly; a straightedge may be drawn in either direction.
    Macro steps are never satisfied by a single element.
    """

    if isinstance(expected, CompassAction):
        return (
            isinstance(element, Circle)
            and element.center_id == expected.center_id
            and element.radius_point_id == expected.radius_point_id
        )
    if isinstance(expected, StraightedgeAction):
        if not isinstance(element, Segment):
            return False
        return {element.from_id, element.to_id} == {expected.from_id, expected.to_id} and (
            element.from_id != element.to_id
        )
    if isinstance(expected, IntersectionAction):
        if not isinstance(element, Point) or element.origin != "intersection":
            return False
        if expected.of_a is None and expected.of_b is None:
            return True
        if candidate is None:
            return False
        pair = resolve_intersection_pair(expected, state)
        if pair is None:
            return False
        return {candidate.of_a, candidate.of_b} == set(pair)
    if isinstance(expected, ExtendAction):
        if not isinstance(element, Point):
            return False
        target = production_point(state, expected.base_id, expected.through_id, expected.distance)
        if target is None:
            return False
        tol = get_engine_config().candidate_tolerance
        return abs(element.x - target[0]) < tol and abs(element.y - target[1]) < tol
    return False
