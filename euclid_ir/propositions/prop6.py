"""Proposition I.6: a triangle with two equal angles has the opposite sides equal.

The equal base angles are a given. C keeps the default shape of the
triangle: it is B turned about A by a fixed angle and scaled by the
default ratio AC / AB.
"""

from __future__ import annotations

import math
from typing import List, Mapping

import numpy as np

from ..facts import FactStore, add_fact, angle_measure, distance_pair
from ..types import (
    ConstructionElement,
    ConstructionState,
    Coord,
    GivenAngleFact,
    MacroAction,
    PropCitation,
    PropositionDef,
    PropositionStep,
    ProofFact,
    ResultSegment,
    StraightedgeAction,
    TutorialSubStep,
)
from .common import given_point, given_segment, macro_tutorial, position, rotation_matrix, straightedge_tutorial

DEFAULT_A: Coord = (0.0, 2.5)
DEFAULT_B: Coord = (-2.0, 0.0)
DEFAULT_C: Coord = (1.0, 0.0)

_AB = np.subtract(DEFAULT_B, DEFAULT_A)
_AC = np.subtract(DEFAULT_C, DEFAULT_A)
AC_RATIO = float(np.linalg.norm(_AC) / np.linalg.norm(_AB))
ROTATION_ANGLE = math.atan2(_AB[0] * _AC[1] - _AB[1] * _AC[0], float(np.dot(_AB, _AC)))


def compute_prop6_given_elements(positions: Mapping[str, Coord]) -> List[ConstructionElement]:
    a = position(positions, "pt-A", DEFAULT_A)
    b = position(positions, "pt-B", DEFAULT_B)
    c = np.asarray(a) + AC_RATIO * (rotation_matrix(ROTATION_ANGLE) @ np.subtract(b, a))
    return [
        given_point("A", *a),
        given_point("B", *b),
        given_point("C", float(c[0]), float(c[1])),
        given_segment("A", "B"),
        given_segment("A", "C"),
        given_segment("B", "C"),
    ]


def get_prop6_tutorial(is_touch: bool) -> List[List[TutorialSubStep]]:
    return [
        macro_tutorial(
            ("pt-B", "pt-A", "pt-A", "pt-C"),
            ("Start of greater", "End of greater", "Start of less", "End of less"),
            is_touch,
            intro="Suppose AB is the greater. Cut off BD equal to AC with Proposition Three.",
        ),
        straightedge_tutorial("pt-D", "pt-C", is_touch),
    ]


def derive_prop6_conclusion(store: FactStore, state: ConstructionState, at_step: int) -> List[ProofFact]:
    return add_fact(
        store,
        distance_pair("pt-A", "pt-B"),
        distance_pair("pt-A", "pt-C"),
        PropCitation(4),
        "AB = AC",
        at_step,
        justification=(
            "Reductio: BD = AC (I.3), BC = BC, ∠DBC = ∠ACB (given), so △DBC ≅ △ACB (I.4). "
            "But D lies between A and B, so △DBC is part of △ACB, against C.N.5. Therefore AB = AC."
        ),
    )


PROP_6 = PropositionDef(
    id=6,
    title="If two angles of a triangle are equal, the sides opposite them are equal",
    kind="theorem",
    given_elements=tuple(compute_prop6_given_elements({})),
    steps=(
        PropositionStep(
            instruction="Cut off from BA a part equal to AC",
            expected=MacroAction(3, ("pt-B", "pt-A", "pt-A", "pt-C"), {"result": "D", "transfer": "E"}),
            highlight_ids=("pt-B", "pt-A", "pt-C"),
            tool="macro",
            citation="I.3",
        ),
        PropositionStep(
            instruction="Join D to C",
            expected=StraightedgeAction("pt-D", "pt-C"),
            highlight_ids=("pt-D", "pt-C"),
            tool="straightedge",
            citation="Post.1",
        ),
    ),
    draggable_point_ids=("pt-A", "pt-B"),
    compute_given_elements=compute_prop6_given_elements,
    given_angle_facts=(
        GivenAngleFact(angle_measure("pt-B", "pt-A", "pt-C"), angle_measure("pt-C", "pt-A", "pt-B"), "∠ABC = ∠ACB"),
    ),
    derive_conclusion=derive_prop6_conclusion,
    get_tutorial=get_prop6_tutorial,
    result_segments=(ResultSegment("pt-A", "pt-B"), ResultSegment("pt-A", "pt-C")),
    theorem_conclusion="AB = AC",
)
