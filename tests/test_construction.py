import math

import pytest

from euclid_ir.construction import (
    add_circle,
    add_point,
    add_segment,
    create_initial_state,
    distance_between,
    get_circle,
    get_point,
    get_point_by_label,
    get_radius,
    get_segment,
    initialize_given,
    label_at,
    label_index,
    skip_point_label,
)
from euclid_ir.propositions.common import given_point, given_segment
from euclid_ir.types import BYRNE, BYRNE_CYCLE


@pytest.mark.parametrize(
    'index, label',
    [(0, 'A'), (25, 'Z'), (26, 'A2'), (27, 'B2'), (52, 'A3')],
)
def test_label_sequence(index, label):
    assert label_at(index) == label
    assert label_index(label) == index


@pytest.mark.parametrize('label', ['a', 'A1', 'AB', 'pt-A', ''])
def test_label_index_rejects_non_sequence_labels(label):
    assert label_index(label) is None


def test_initialize_given_continues_after_highest_label():
    state = initialize_given([given_point('A', 0, 0), given_point('C', 1, 0), given_segment('A', 'C')])

    assert state.next_label_index == 3
    assert state.next_color_index == 0

    state, point = add_point(state, 0.5, 1.0, 'intersection')
    assert point.label == 'D'
    assert point.id == 'pt-D'


def test_add_point_skips_labels_in_use():
    state = initialize_given([given_point('A', 0, 0), given_point('B', 1, 0)])
    state = initialize_given(list(state.elements) + [given_point('D', 2, 0)])
    state = skip_point_label(state, 'B')

    state, point = add_point(state, 3.0, 0.0, 'intersection')

    assert point.label == 'E'


def test_elements_cycle_through_byrne_colors():
    state = initialize_given([given_point('A', 0, 0), given_point('B', 4, 0), given_segment('A', 'B')])
    assert get_point(state, 'pt-A').color == BYRNE.given

    state, circle = add_circle(state, 'pt-A', 'pt-B')
    state, segment = add_segment(state, 'pt-B', 'pt-A')
    state, point = add_point(state, 0.0, 4.0, 'intersection')

    assert [circle.color, segment.color, point.color] == list(BYRNE_CYCLE[:3])
    assert state.next_color_index == 3


def test_skip_point_label_consumes_label_and_color():
    state = initialize_given([given_point('A', 0, 0), given_point('B', 1, 0)])

    skipped = skip_point_label(state, 'C')

    assert skipped.elements == state.elements
    assert skipped.next_label_index == 3
    assert skipped.next_color_index == 1
    _, point = add_point(skipped, 0.0, 1.0, 'intersection')
    assert point.label == 'D'


def test_duplicate_label_gets_unique_id():
    state = initialize_given([given_point('A', 0, 0)])

    state, point = add_point(state, 1.0, 1.0, 'intersection', 'A')

    assert point.id != 'pt-A'
    assert get_point_by_label(state, 'A').id == 'pt-A'


def test_radius_and_distance_follow_point_positions():
    state = initialize_given([given_point('A', -2, 0), given_point('B', 2, 0)])
    state, circle = add_circle(state, 'pt-A', 'pt-B')

    assert math.isclose(get_radius(state, circle.id), 4.0)
    assert math.isclose(distance_between(state, 'pt-A', 'pt-B'), 4.0)
    assert get_radius(state, 'cir-99') == 0.0
    assert distance_between(state, 'pt-A', 'pt-Z') is None


def test_states_are_immutable():
    state = create_initial_state()

    new_state, _ = add_point(state, 0.0, 0.0, 'given', 'A')

    assert state.elements == ()
    assert len(new_state.elements) == 1


def test_typed_lookups_only_return_their_kind():
    state = initialize_given([given_point('A', 0, 0), given_point('B', 1, 0), given_segment('A', 'B')])
    state, circle = add_circle(state, 'pt-A', 'pt-B')

    assert get_segment(state, 'seg-AB').from_id == 'pt-A'
    assert get_circle(state, circle.id) == circle
    assert get_segment(state, circle.id) is None
    assert get_circle(state, 'seg-AB') is None
    assert get_point(state, 'seg-AB') is None
