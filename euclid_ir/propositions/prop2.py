"""Proposition I.2: to place at a given point a straight line equal to a given straight line."""

from __future__ import annotations

from typing import List

from ..facts import FactStore, add_fact, distance_pair, query_equality
from ..types import (
    CircleRef,
    CN1Citation,
    CN3Citation,
    CompassAction,
    ConstructionState,
    IntersectionAction,
    MacroAction,
    PropositionDef,
    PropositionStep,
    ProofFact,
    ResultSegment,
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
    straightedge_tutorial,
)


def get_prop2_tutorial(is_touch: bool) -> List[List[TutorialSubStep]]:
    return [
        straightedge_tutorial("pt-A", "pt-B", is_touch),
        macro_tutorial(
            ("pt-A", "pt-B"),
            ("First endpoint", "Second endpoint"),
            is_touch,
            intro="Build an equilateral triangle on AB with Proposition One.",
        ),
        compass_tutorial("pt-B", "pt-C", is_touch),
        intersection_tutorial(
            CircleRef("pt-B", "pt-C"),
            SegmentRef("pt-D", "pt-B"),
            "E",
            is_touch,
            beyond_id="pt-B",
            where="where the circle crosses DB produced past B",
        ),
        compass_tutorial("pt-D", "pt-E", is_touch),
        intersection_tutorial(
            CircleRef("pt-D", "pt-E"),
            SegmentRef("pt-D", "pt-A"),
            "F",
            is_touch,
            beyond_id="pt-A",
            where="where the circle crosses DA produced past A",
        ),
    ]


def derive_prop2_conclusion(store: FactStore, state: ConstructionState, at_step: int) -> List[ProofFact]:
    af = distance_pair("pt-A", "pt-F")
    be = distance_pair("pt-B", "pt-E")
    bc = distance_pair("pt-B", "pt-C")
    new_facts = add_fact(
        store,
        af,
        be,
        CN3Citation(whole=distance_pair("pt-D", "pt-F"), part=distance_pair("pt-D", "pt-A")),
        "AF = BE",
        at_step,
        justification="C.N.3: DF = DE and DA = DB, so the remainders AF and BE are equal",
    )
    if not query_equality(store, af, bc):
        new_facts += add_fact(
            store,
            af,
            bc,
            CN1Citation(via=be),
            "AF = BC",
            at_step,
            justification="C.N.1: AF and BC are both equal to BE",
        )
    return new_facts


PROP_2 = PropositionDef(
    id=2,
    title="To place at a given point a straight line equal to a given straight line",
    kind="construction",
    given_elements=(
        given_point("A", -1.5, 1.5),
        given_point("B", 0.0, 0.0),
        given_point("C", 1.5, 0.0),
        given_segment("B", "C"),
    ),
    steps=(
        PropositionStep(
            instruction="Join A to B",
            expected=StraightedgeAction("pt-A", "pt-B"),
            highlight_ids=("pt-A", "pt-B"),
            tool="straightedge",
            citation="Post.1",
        ),
        PropositionStep(
            instruction="Construct the equilateral triangle DAB on AB",
            expected=MacroAction(1, ("pt-A", "pt-B"), {"apex": "D"}),
            highlight_ids=("pt-A", "pt-B"),
            tool="macro",
            citation="I.1",
        ),
        PropositionStep(
            instruction="Draw a circle centred at B through C",
            expected=CompassAction("pt-B", "pt-C"),
            highlight_ids=("pt-B", "pt-C"),
            tool="compass",
            citation="Post.3",
        ),
        PropositionStep(
            instruction="Produce DB past B to meet the circle at E",
            expected=IntersectionAction(
                of_a=CircleRef("pt-B", "pt-C"),
                of_b=SegmentRef("pt-D", "pt-B"),
                beyond_id="pt-B",
                label="E",
            ),
            highlight_ids=("pt-D", "pt-B"),
            tool=None,
            citation="Post.2",
        ),
        PropositionStep(
            instruction="Draw a circle centred at D through E",
            expected=CompassAction("pt-D", "pt-E"),
            highlight_ids=("pt-D", "pt-E"),
            tool="compass",
            citation="Post.3",
        ),
        PropositionStep(
            instruction="Produce DA past A to meet the circle at F",
            expected=IntersectionAction(
                of_a=CircleRef("pt-D", "pt-E"),
                of_b=SegmentRef("pt-D", "pt-A"),
                beyond_id="pt-A",
                label="F",
            ),
            highlight_ids=("pt-D", "pt-A"),
            tool=None,
            citation="Post.2",
        ),
    ),
    result_segments=(ResultSegment("pt-A", "pt-F"),),
    draggable_point_ids=("pt-A", "pt-B", "pt-C"),
    derive_conclusion=derive_prop2_conclusion,
    get_tutorial=get_prop2_tutorial,
)
