"""Proposition I.5: the base angles of an isosceles triangle are equal.

C is derived from A and B by a fixed rotation about A, so AB = AC survives
any drag of the two draggable points.
"""

from __future__ import annotations

import math
from typing import List, Mapping

from ..facts import FactStore, add_angle_fact, add_fact, angle_measure, distance_pair
from ..types import (
    CircleRef,
    CN3AngleCitation,
    CN3Citation,
    CompassAction,
    ConstructionElement,
    ConstructionState,
    Coord,
    GivenFact,
    IntersectionAction,
    MacroAction,
    PropCitation,
    PropositionDef,
    PropositionStep,
    ProofFact,
    SegmentRef,
    StraightedgeAction,
    TutorialSubStep,
)
from .common import (
    compass_tutorial,
    given_point,
    given_segment,
    intersection_tutorial,
    macro_tutorial,
    position,
    rotate_about,
    straightedge_tutorial,
)

DEFAULT_A: Coord = (0.0, 2.0)
DEFAULT_B: Coord = (-2.0, -1.0)
DEFAULT_C: Coord = (2.0, -1.0)


def _apex_rotation() -> float:
    ab = (DEFAULT_B[0] - DEFAULT_A[0], DEFAULT_B[1] - DEFAULT_A[1])
    ac = (DEFAULT_C[0] - DEFAULT_A[0], DEFAULT_C[1] - DEFAULT_A[1])
    return math.atan2(ab[0] * ac[1] - ab[1] * ac[0], ab[0] * ac[0] + ab[1] * ac[1])


ROTATION_ANGLE = _apex_rotation()


def compute_prop5_given_elements(positions: Mapping[str, Coord]) -> List[ConstructionElement]:
    a = position(positions, "pt-A", DEFAULT_A)
    b = position(positions, "pt-B", DEFAULT_B)
    c = rotate_about(a, b, ROTATION_ANGLE, a)
    return [
        given_point("A", *a),
        given_point("B", *b),
        given_point("C", *c),
        given_segment("A", "B"),
        given_segment("A", "C"),
        given_segment("B", "C"),
    ]


def get_prop5_tutorial(is_touch: bool) -> List[List[TutorialSubStep]]:
    return [
        compass_tutorial("pt-B", "pt-C", is_touch, intro="AB equals AC. "),
        intersection_tutorial(
            CircleRef("pt-B", "pt-C"),
            SegmentRef("pt-A", "pt-B"),
            "F",
            is_touch,
            beyond_id="pt-B",
            where="where the circle crosses AB produced past B",
        ),
        macro_tutorial(
            ("pt-A", "pt-C", "pt-A", "pt-F"),
            ("Start of greater", "End of greater", "Start of less", "End of less"),
            is_touch,
            intro="Cut off AG equal to AF with Proposition Three.",
        ),
        straightedge_tutorial("pt-F", "pt-C", is_touch),
        straightedge_tutorial("pt-G", "pt-B", is_touch),
    ]


def derive_prop5_conclusion(store: FactStore, state: ConstructionState, at_step: int) -> List[ProofFact]:
    new_facts = add_fact(
        store,
        distance_pair("pt-C", "pt-G"),
        distance_pair("pt-B", "pt-F"),
        CN3Citation(whole=distance_pair("pt-A", "pt-G"), part=distance_pair("pt-A", "pt-C")),
        "CG = BF",
        at_step,
        justification="C.N.3: AG = AF and AC = AB, so the remainders CG and BF are equal",
    )
    new_facts += add_fact(
        store,
        distance_pair("pt-F", "pt-C"),
        distance_pair("pt-G", "pt-B"),
        PropCitation(4),
        "FC = GB",
        at_step,
        justification="I.4: △AFC ≅ △AGB (AF = AG, AC = AB, common angle at A)",
    )
    new_facts += add_angle_fact(
        store,
        angle_measure("pt-C", "pt-A", "pt-F"),
        angle_measure("pt-B", "pt-A", "pt-G"),
        PropCitation(4),
        "∠ACF = ∠ABG",
        at_step,
        justification="I.4: △AFC ≅ △AGB",
    )
    new_facts += add_angle_fact(
        store,
        angle_measure("pt-B", "pt-F", "pt-C"),
        angle_measure("pt-C", "pt-G", "pt-B"),
        PropCitation(4),
        "∠FBC = ∠GCB",
        at_step,
        justification="I.4: △BFC ≅ △CGB (BF = CG, FC = GB, ∠BFC = ∠CGB)",
    )
    new_facts += add_angle_fact(
        store,
        angle_measure("pt-C", "pt-F", "pt-B"),
        angle_measure("pt-B", "pt-G", "pt-C"),
        PropCitation(4),
        "∠FCB = ∠GBC",
        at_step,
        justification="I.4: △BFC ≅ △CGB",
    )
    new_facts += add_angle_fact(
        store,
        angle_measure("pt-B", "pt-A", "pt-C"),
        angle_measure("pt-C", "pt-A", "pt-B"),
        CN3AngleCitation(
            whole=angle_measure("pt-B", "pt-A", "pt-G"),
            part=angle_measure("pt-B", "pt-G", "pt-C"),
        ),
        "∠ABC = ∠ACB",
        at_step,
        justification="C.N.3: ∠ABG = ∠ACF and ∠GBC = ∠FCB, so the remainders are equal",
    )
    return new_facts


PROP_5 = PropositionDef(
    id=5,
    title="In isosceles triangles the base angles are equal",
    kind="theorem",
    given_elements=tuple(compute_prop5_given_elements({})),
    steps=(
        PropositionStep(
            instruction="Draw a circle centred at B through C",
            expected=CompassAction("pt-B", "pt-C"),
            highlight_ids=("pt-B", "pt-C"),
            tool="compass",
            citation="Post.3",
        ),
        PropositionStep(
            instruction="Mark where the circle crosses line AB past B",
            expected=IntersectionAction(
                of_a=CircleRef("pt-B", "pt-C"),
                of_b=SegmentRef("pt-A", "pt-B"),
                beyond_id="pt-B",
                label="F",
            ),
            tool=None,
            citation="Def.15",
        ),
        PropositionStep(
            instruction="From AC produced, cut off AG equal to AF",
            expected=MacroAction(3, ("pt-A", "pt-C", "pt-A", "pt-F"), {"result": "G"}),
            highlight_ids=("pt-A", "pt-C", "pt-F"),
            tool="macro",
            citation="I.3",
        ),
        PropositionStep(
            instruction="Join F to C",
            expected=StraightedgeAction("pt-F", "pt-C"),
            highlight_ids=("pt-F", "pt-C"),
            tool="straightedge",
            citation="Post.1",
        ),
        PropositionStep(
            instruction="Join G to B",
            expected=StraightedgeAction("pt-G", "pt-B"),
            highlight_ids=("pt-G", "pt-B"),
            tool="straightedge",
            citation="Post.1",
        ),
    ),
    draggable_point_ids=("pt-A", "pt-B"),
    compute_given_elements=compute_prop5_given_elements,
    given_facts=(GivenFact(distance_pair("pt-A", "pt-B"), distance_pair("pt-A", "pt-C"), "AB = AC"),),
    derive_conclusion=derive_prop5_conclusion,
    get_tutorial=get_prop5_tutorial,
    theorem_conclusion="∠ABC = ∠ACB\n∠FBC = ∠GCB",
)
