"""Proposition I.3: from the greater of two unequal lines, cut off a part equal to the less."""

from __future__ import annotations

from typing import List

from ..facts import FactStore, add_fact, distance_pair
from ..types import (
    CircleRef,
    CN1Citation,
    CompassAction,
    ConstructionState,
    IntersectionAction,
    MacroAction,
    PropositionDef,
    PropositionStep,
    ProofFact,
    ResultSegment,
    SegmentRef,
    TutorialSubStep,
)
from .common import compass_tutorial, given_point, given_segment, intersection_tutorial, macro_tutorial


def get_prop3_tutorial(is_touch: bool) -> List[List[TutorialSubStep]]:
    return [
        macro_tutorial(
            ("pt-A", "pt-C", "pt-D"),
            ("Target point", "Segment start", "Segment end"),
            is_touch,
            intro="Copy the length CD to A with Proposition Two.",
        ),
        compass_tutorial("pt-A", "pt-E", is_touch),
        intersection_tutorial(
            CircleRef("pt-A", "pt-E"),
            SegmentRef("pt-A", "pt-B"),
            "F",
            is_touch,
            where="where the circle crosses AB",
        ),
    ]


def derive_prop3_conclusion(store: FactStore, state: ConstructionState, at_step: int) -> List[ProofFact]:
    return add_fact(
        store,
        distance_pair("pt-A", "pt-F"),
        distance_pair("pt-C", "pt-D"),
        CN1Citation(via=distance_pair("pt-A", "pt-E")),
        "AF = CD",
        at_step,
        justification="C.N.1: AF and CD are both equal to AE",
    )


PROP_3 = PropositionDef(
    id=3,
    title="Given two unequal straight lines, to cut off from the greater a straight line equal to the less",
    kind="construction",
    given_elements=(
        given_point("A", -2.5, 0.5),
        given_point("B", 1.5, 0.5),
        given_point("C", 0.5, -1.5),
        given_point("D", 2.0, -1.5),
        given_segment("A", "B"),
        given_segment("C", "D"),
    ),
    steps=(
        PropositionStep(
            instruction="Place at A a line AE equal to CD",
            expected=MacroAction(2, ("pt-A", "pt-C", "pt-D"), {"result": "E"}),
            highlight_ids=("pt-A", "pt-C", "pt-D"),
            tool="macro",
            citation="I.2",
        ),
        PropositionStep(
            instruction="Draw a circle centred at A through E",
            expected=CompassAction("pt-A", "pt-E"),
            highlight_ids=("pt-A", "pt-E"),
            tool="compass",
            citation="Post.3",
        ),
        PropositionStep(
            instruction="Mark F where the circle crosses AB",
            expected=IntersectionAction(
                of_a=CircleRef("pt-A", "pt-E"),
                of_b=SegmentRef("pt-A", "pt-B"),
                label="F",
            ),
            highlight_ids=("pt-A", "pt-B"),
            tool=None,
            citation="Def.15",
        ),
    ),
    result_segments=(ResultSegment("pt-A", "pt-F"),),
    draggable_point_ids=("pt-A", "pt-B", "pt-C", "pt-D"),
    derive_conclusion=derive_prop3_conclusion,
    get_tutorial=get_prop3_tutorial,
)
