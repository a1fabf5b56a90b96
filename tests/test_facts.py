import pytest

from euclid_ir.construction import initialize_given
from euclid_ir.facts import (
    add_angle_fact,
    add_fact,
    angle_measure,
    create_fact_store,
    distance_pair,
    facts_at_step,
    format_angle,
    format_distance,
    get_equal_angles,
    get_equal_distances,
    query_angle_equality,
    query_equality,
    rebuild_fact_store,
)
from euclid_ir.propositions.common import given_point
from euclid_ir.types import CN1Citation, Def15Citation, GivenCitation


def d(a, b):
    return distance_pair(f'pt-{a}', f'pt-{b}')


def test_distance_pairs_are_unordered():
    store = create_fact_store()
    add_fact(store, d('A', 'B'), d('C', 'D'), GivenCitation(), 'AB = CD', -1)

    assert query_equality(store, d('B', 'A'), d('D', 'C'))
    assert not query_equality(store, d('A', 'B'), d('A', 'C'))


def test_equality_is_transitive():
    store = create_fact_store()
    add_fact(store, d('A', 'C'), d('A', 'B'), Def15Citation('cir-1'), 'AC = AB', 2)
    add_fact(store, d('B', 'C'), d('B', 'A'), Def15Citation('cir-2'), 'BC = BA', 2)

    assert query_equality(store, d('A', 'C'), d('B', 'C'))
    assert {pair.key for pair in get_equal_distances(store, d('C', 'A'))} == {
        d('A', 'B').key,
        d('A', 'C').key,
        d('B', 'C').key,
    }


def test_unknown_pair_is_only_equal_to_itself():
    store = create_fact_store()

    assert query_equality(store, d('A', 'B'), d('B', 'A'))
    assert get_equal_distances(store, d('A', 'B')) == [d('A', 'B')]


def test_trivial_fact_is_not_recorded():
    store = create_fact_store()

    assert add_fact(store, d('A', 'B'), d('B', 'A'), GivenCitation(), 'AB = BA', 0) == []
    assert store.facts == []


def test_redundant_fact_is_still_recorded():
    store = create_fact_store()
    add_fact(store, d('A', 'B'), d('C', 'D'), GivenCitation(), 'AB = CD', -1)
    add_fact(store, d('C', 'D'), d('E', 'F'), GivenCitation(), 'CD = EF', -1)

    added = add_fact(
        store, d('A', 'B'), d('E', 'F'), CN1Citation(via=d('C', 'D')), 'AB = EF', 3, 'C.N.1'
    )

    assert len(added) == 1
    assert [fact.id for fact in store.facts] == [1, 2, 3]
    assert added[0].citation.type == 'cn1'
    assert added[0].kind == 'distance'


def test_angles_keep_their_vertex():
    store = create_fact_store()
    abc = angle_measure('pt-B', 'pt-A', 'pt-C')
    acb = angle_measure('pt-C', 'pt-A', 'pt-B')
    add_angle_fact(store, abc, acb, GivenCitation(), '∠ABC = ∠ACB', -1)

    assert query_angle_equality(store, angle_measure('pt-B', 'pt-C', 'pt-A'), acb)
    assert not query_angle_equality(store, angle_measure('pt-A', 'pt-B', 'pt-C'), acb)
    assert len(get_equal_angles(store, abc)) == 2
    assert store.facts[0].kind == 'angle'


def test_distance_and_angle_operands_do_not_mix():
    store = create_fact_store()

    with pytest.raises(TypeError):
        add_fact(store, d('A', 'B'), angle_measure('pt-A', 'pt-B', 'pt-C'), GivenCitation(), 'bad', 0)
    with pytest.raises(TypeError):
        add_angle_fact(store, d('A', 'B'), d('C', 'D'), GivenCitation(), 'bad', 0)


def test_copy_leaves_original_untouched():
    store = create_fact_store()
    add_fact(store, d('A', 'B'), d('C', 'D'), GivenCitation(), 'AB = CD', -1)

    clone = store.copy()
    add_fact(clone, d('C', 'D'), d('E', 'F'), GivenCitation(), 'CD = EF', 0)

    assert len(store.facts) == 1
    assert not query_equality(store, d('A', 'B'), d('E', 'F'))
    assert query_equality(clone, d('A', 'B'), d('E', 'F'))


def test_rebuild_reproduces_classes_and_ids():
    store = create_fact_store()
    add_fact(store, d('A', 'B'), d('C', 'D'), GivenCitation(), 'AB = CD', -1)
    add_fact(store, d('C', 'D'), d('E', 'F'), GivenCitation(), 'CD = EF', 1)

    rebuilt = rebuild_fact_store(store.facts)

    assert rebuilt.facts == store.facts
    assert rebuilt.next_id == store.next_id
    assert query_equality(rebuilt, d('A', 'B'), d('E', 'F'))
    assert facts_at_step(rebuilt, 1) == [store.facts[1]]


def test_formatting_uses_labels_when_state_is_known():
    state = initialize_given([given_point('A', 0, 0), given_point('B', 1, 0), given_point('C', 0, 1)])

    assert format_distance(d('A', 'B'), state) == 'AB'
    assert format_distance(distance_pair('pt-A', 'pt-Q')) == 'AQ'
    assert format_angle(angle_measure('pt-B', 'pt-A', 'pt-C'), state) == '∠ABC'
