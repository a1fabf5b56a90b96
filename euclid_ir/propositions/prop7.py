"""Proposition I.7: on one side of a line there cannot be two distinct points
whose distances from its ends are respectively equal.

The figure is the impossible one the proof refutes, so AC = AD and BC = BD
are stipulated and all four points drag freely.
"""

from __future__ import annotations

from typing import List, Mapping

import numpy as np

from ..construction import get_point
from ..facts import FactStore, add_angle_fact, angle_measure, distance_pair
from ..types import (
    BYRNE,
    ConstructionElement,
    ConstructionState,
    Coord,
    GivenFact,
    PropCitation,
    PropositionDef,
    PropositionStep,
    ProofFact,
    Segment,
    StraightedgeAction,
    TutorialSubStep,
)
from .common import given_point, given_segment, position, straightedge_tutorial

DEFAULT_A: Coord = (-1.5, 0.0)
DEFAULT_B: Coord = (1.5, 0.0)
DEFAULT_C: Coord = (0.0, 2.5)
DEFAULT_D: Coord = (1.0, 2.3)

D_INSIDE_CONCLUSION = "C and D cannot be distinct\n(C.N.5: ∠BDC > ∠ADC = ∠ACD > ∠BCD = ∠BDC)"
D_OUTSIDE_CONCLUSION = "C and D cannot be distinct\n(C.N.5: ∠ADC > ∠BDC = ∠BCD > ∠ACD = ∠ADC)"


def _coloured_segment(from_label: str, to_label: str, color: str) -> Segment:
    return Segment(
        id=f"seg-{from_label}{to_label}",
        from_id=f"pt-{from_label}",
        to_id=f"pt-{to_label}",
        color=color,
        origin="given",
    )


def compute_prop7_given_elements(positions: Mapping[str, Coord]) -> List[ConstructionElement]:
    return [
        given_point("A", *position(positions, "pt-A", DEFAULT_A)),
        given_point("B", *position(positions, "pt-B", DEFAULT_B)),
        given_point("C", *position(positions, "pt-C", DEFAULT_C)),
        given_point("D", *position(positions, "pt-D", DEFAULT_D)),
        given_segment("A", "B"),
        _coloured_segment("A", "C", BYRNE.blue),
        _coloured_segment("A", "D", BYRNE.blue),
        _coloured_segment("B", "C", BYRNE.red),
        _coloured_segment("B", "D", BYRNE.red),
    ]


def _angle_at(vertex: Coord, p1: Coord, p2: Coord) -> float:
    v1 = np.subtract(p1, vertex)
    v2 = np.subtract(p2, vertex)
    norms = float(np.linalg.norm(v1) * np.linalg.norm(v2))
    if norms == 0.0:
        return 0.0
    return float(np.arccos(np.clip(np.dot(v1, v2) / norms, -1.0, 1.0)))


def compute_prop7_theorem_conclusion(state: ConstructionState) -> str:
    """Word the contradiction for D inside or outside triangle ACB."""

    a, b, c, d = (get_point(state, f"pt-{label}") for label in "ABCD")
    if a is None or b is None or c is None or d is None:
        return D_INSIDE_CONCLUSION
    if _angle_at(c.coords, a.coords, d.coords) > _angle_at(c.coords, b.coords, d.coords):
        return D_INSIDE_CONCLUSION
    return D_OUTSIDE_CONCLUSION


def get_prop7_tutorial(is_touch: bool) -> List[List[TutorialSubStep]]:
    return [straightedge_tutorial("pt-C", "pt-D", is_touch)]


def derive_prop7_conclusion(store: FactStore, state: ConstructionState, at_step: int) -> List[ProofFact]:
    new_facts = add_angle_fact(
        store,
        angle_measure("pt-C", "pt-A", "pt-D"),
        angle_measure("pt-D", "pt-A", "pt-C"),
        PropCitation(5),
        "∠ACD = ∠ADC",
        at_step,
        justification="I.5: triangle ACD is isosceles (AC = AD)",
    )
    new_facts += add_angle_fact(
        store,
        angle_measure("pt-C", "pt-B", "pt-D"),
        angle_measure("pt-D", "pt-B", "pt-C"),
        PropCitation(5),
        "∠BCD = ∠BDC",
        at_step,
        justification="I.5: triangle BCD is isosceles (BC = BD)",
    )
    return new_facts


PROP_7 = PropositionDef(
    id=7,
    title=(
        "Given two lines from the ends of a line meeting at a point, "
        "no two other equal lines can be constructed on the same side"
    ),
    kind="theorem",
    given_elements=tuple(compute_prop7_given_elements({})),
    steps=(
        PropositionStep(
            instruction="Join C to D",
            expected=StraightedgeAction("pt-C", "pt-D"),
            highlight_ids=("pt-C", "pt-D"),
            tool="straightedge",
            citation="Post.1",
        ),
    ),
    draggable_point_ids=("pt-A", "pt-B", "pt-C", "pt-D"),
    compute_given_elements=compute_prop7_given_elements,
    given_facts=(
        GivenFact(distance_pair("pt-A", "pt-C"), distance_pair("pt-A", "pt-D"), "AC = AD"),
        GivenFact(distance_pair("pt-B", "pt-C"), distance_pair("pt-B", "pt-D"), "BC = BD"),
    ),
    derive_conclusion=derive_prop7_conclusion,
    get_tutorial=get_prop7_tutorial,
    theorem_conclusion=D_INSIDE_CONCLUSION,
    compute_theorem_conclusion=compute_prop7_theorem_conclusion,
)
