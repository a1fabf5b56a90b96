import pytest

from euclid_ir.construction import add_circle, add_point, add_segment, initialize_given
from euclid_ir.derivation import derive_def15_facts
from euclid_ir.facts import create_fact_store, distance_pair, query_equality
from euclid_ir.intersections import intersections_between
from euclid_ir.propositions.common import given_point, given_segment
from euclid_ir.selectors import (
    canonical_candidate,
    resolve_intersection_pair,
    resolve_selector,
    selector_point_refs,
)
from euclid_ir.types import CircleRef, ElementRef, IntersectionAction, SegmentRef


def _state():
    state = initialize_given([given_point('A', -2, 0), given_point('B', 2, 0), given_segment('A', 'B')])
    state, first = add_circle(state, 'pt-A', 'pt-B')
    state, second = add_circle(state, 'pt-B', 'pt-A')
    return state, first, second


def test_circle_ref_distinguishes_center_and_radius_point():
    state, first, second = _state()

    assert resolve_selector(CircleRef('pt-A', 'pt-B'), state) == first.id
    assert resolve_selector(CircleRef('pt-B', 'pt-A'), state) == second.id
    assert resolve_selector(CircleRef('pt-A', 'pt-C'), state) is None


def test_segment_ref_matches_either_direction():
    state, _, _ = _state()

    assert resolve_selector(SegmentRef('pt-A', 'pt-B'), state) == 'seg-AB'
    assert resolve_selector(SegmentRef('pt-B', 'pt-A'), state) == 'seg-AB'


def test_earliest_matching_segment_wins():
    state, _, _ = _state()
    state, _ = add_segment(state, 'pt-B', 'pt-A')

    assert resolve_selector(SegmentRef('pt-A', 'pt-B'), state) == 'seg-AB'


def test_element_ref_needs_an_existing_element():
    state, first, _ = _state()

    assert resolve_selector(ElementRef(first.id), state) == first.id
    assert resolve_selector(ElementRef('cir-42'), state) is None


def test_selector_point_refs():
    assert selector_point_refs(CircleRef('pt-A', 'pt-B')) == [('center_id', 'pt-A'), ('radius_point_id', 'pt-B')]
    assert selector_point_refs(SegmentRef('pt-C', 'pt-D')) == [('from_id', 'pt-C'), ('to_id', 'pt-D')]
    assert selector_point_refs(ElementRef('cir-1')) == []


def test_intersection_pair_resolution():
    state, first, second = _state()
    step = IntersectionAction(of_a=CircleRef('pt-A', 'pt-B'), of_b=CircleRef('pt-B', 'pt-A'), label='C')
    wildcard = IntersectionAction(label='C')
    dangling = IntersectionAction(of_a=CircleRef('pt-A', 'pt-B'), of_b=SegmentRef('pt-C', 'pt-A'), label='D')

    assert resolve_intersection_pair(step, state) == (first.id, second.id)
    assert resolve_intersection_pair(wildcard, state) == (None, None)
    assert resolve_intersection_pair(dangling, state) is None


def test_canonical_candidate_is_the_upper_crossing():
    state, first, second = _state()
    candidates = intersections_between(state, second.id, first.id)
    step = IntersectionAction(of_a=CircleRef('pt-A', 'pt-B'), of_b=CircleRef('pt-B', 'pt-A'), label='C')

    chosen = canonical_candidate(step, state, candidates)

    assert chosen.coords == pytest.approx((0.0, 12 ** 0.5))


def test_def15_facts_for_a_point_on_two_circles():
    state, first, second = _state()
    candidate = intersections_between(state, first.id, second.id)[0]
    state, point = add_point(state, candidate.x, candidate.y, 'intersection', 'C')
    store = create_fact_store()

    facts = derive_def15_facts(candidate, point.id, state, store, 2)

    assert [fact.statement for fact in facts] == ['AC = AB', 'BC = BA']
    assert all(fact.citation.type == 'def15' for fact in facts)
    assert query_equality(store, distance_pair('pt-A', 'pt-C'), distance_pair('pt-B', 'pt-C'))


def test_def15_skips_the_radius_point_itself():
    state, first, _ = _state()
    store = create_fact_store()
    candidate = intersections_between(state, first.id, 'seg-AB')[0]

    assert derive_def15_facts(candidate, 'pt-B', state, store, 0) == []
