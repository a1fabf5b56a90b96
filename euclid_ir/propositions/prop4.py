"""Proposition I.4: side-angle-side congruence.

Triangle DEF is the image of ABC under a rotation by ``THETA`` that carries
A onto D, so AB = DE, AC = DF and the included angles agree for any drag of
A, B, C or D.
"""

from __future__ import annotations

from typing import List, Mapping

from ..facts import FactStore, add_angle_fact, add_fact, angle_measure, distance_pair
from ..types import (
    CN4Citation,
    ConstructionElement,
    ConstructionState,
    Coord,
    GivenAngleFact,
    GivenFact,
    PropositionDef,
    PropositionStep,
    ProofFact,
    ResultSegment,
    StraightedgeAction,
    TutorialSubStep,
)
from .common import given_point, given_segment, position, rotate_about, straightedge_tutorial

THETA = 0.4

DEFAULT_A: Coord = (-4.0, -0.5)
DEFAULT_B: Coord = (-6.2, -1.5)
DEFAULT_C: Coord = (-2.8, 1.8)
DEFAULT_D: Coord = (2.5, -0.5)


def compute_prop4_given_elements(positions: Mapping[str, Coord]) -> List[ConstructionElement]:
    a = position(positions, "pt-A", DEFAULT_A)
    b = position(positions, "pt-B", DEFAULT_B)
    c = position(positions, "pt-C", DEFAULT_C)
    d = position(positions, "pt-D", DEFAULT_D)
    e = rotate_about(a, b, THETA, d)
    f = rotate_about(a, c, THETA, d)
    return [
        given_point("A", *a),
        given_point("B", *b),
        given_point("C", *c),
        given_segment("A", "B"),
        given_segment("A", "C"),
        given_segment("B", "C"),
        given_point("D", *d),
        given_point("E", *e),
        given_point("F", *f),
        given_segment("D", "E"),
        given_segment("D", "F"),
    ]


def get_prop4_tutorial(is_touch: bool) -> List[List[TutorialSubStep]]:
    return [straightedge_tutorial("pt-E", "pt-F", is_touch)]


def derive_prop4_conclusion(store: FactStore, state: ConstructionState, at_step: int) -> List[ProofFact]:
    new_facts = add_fact(
        store,
        distance_pair("pt-B", "pt-C"),
        distance_pair("pt-E", "pt-F"),
        CN4Citation(),
        "BC = EF",
        at_step,
        justification="C.N.4: with AB = DE, AC = DF and ∠BAC = ∠EDF the triangles coincide",
    )
    new_facts += add_angle_fact(
        store,
        angle_measure("pt-B", "pt-A", "pt-C"),
        angle_measure("pt-E", "pt-D", "pt-F"),
        CN4Citation(),
        "∠ABC = ∠DEF",
        at_step,
        justification="C.N.4: the remaining angles of coinciding triangles coincide",
    )
    new_facts += add_angle_fact(
        store,
        angle_measure("pt-C", "pt-A", "pt-B"),
        angle_measure("pt-F", "pt-D", "pt-E"),
        CN4Citation(),
        "∠ACB = ∠DFE",
        at_step,
        justification="C.N.4: the remaining angles of coinciding triangles coincide",
    )
    return new_facts


PROP_4 = PropositionDef(
    id=4,
    title="If two triangles have two sides and the included angle equal, the triangles are congruent",
    kind="theorem",
    given_elements=tuple(compute_prop4_given_elements({})),
    steps=(
        PropositionStep(
            instruction="Join E to F",
            expected=StraightedgeAction("pt-E", "pt-F"),
            highlight_ids=("pt-E", "pt-F"),
            tool="straightedge",
            citation="Post.1",
        ),
    ),
    result_segments=(
        ResultSegment("pt-B", "pt-C"),
        ResultSegment("pt-E", "pt-F"),
    ),
    draggable_point_ids=("pt-A", "pt-B", "pt-C", "pt-D"),
    compute_given_elements=compute_prop4_given_elements,
    given_facts=(
        GivenFact(distance_pair("pt-A", "pt-B"), distance_pair("pt-D", "pt-E"), "AB = DE"),
        GivenFact(distance_pair("pt-A", "pt-C"), distance_pair("pt-D", "pt-F"), "AC = DF"),
    ),
    given_angle_facts=(
        GivenAngleFact(
            angle_measure("pt-A", "pt-B", "pt-C"),
            angle_measure("pt-D", "pt-E", "pt-F"),
            "∠BAC = ∠EDF",
        ),
    ),
    derive_conclusion=derive_prop4_conclusion,
    get_tutorial=get_prop4_tutorial,
    theorem_conclusion="△ABC = △DEF\n∠ABC = ∠DEF, ∠ACB = ∠DFE",
)
