import pytest

from euclid_ir.propositions import PROP_1, PROP_2, PROP_REGISTRY
from euclid_ir.stepper import ToolEvent, compass_drag_to, compass_press, start_session
from euclid_ir.tutorial import (
    TutorialCursor,
    advance_tutorial,
    current_sub_step,
    sync_tutorial,
    tutorial_for,
)
from euclid_ir.types import CompassAction, MacroAction, StraightedgeAction


@pytest.mark.parametrize('prop_id', sorted(PROP_REGISTRY))
@pytest.mark.parametrize('is_touch', [False, True])
def test_tutorial_has_one_entry_per_step(prop_id, is_touch):
    prop = PROP_REGISTRY[prop_id]

    tutorial = tutorial_for(prop, is_touch)

    assert len(tutorial) == len(prop.steps)
    for step, sub_steps in zip(prop.steps, tutorial):
        expected = step.expected
        if isinstance(expected, CompassAction):
            assert len(sub_steps) == 3
        elif isinstance(expected, MacroAction):
            assert len(sub_steps) == len(expected.input_point_ids)
        else:
            assert len(sub_steps) == 1
        assert sub_steps[-1].advance_on is None


def test_touch_wording_differs():
    mouse = tutorial_for(PROP_1, is_touch=False)[0][0]
    touch = tutorial_for(PROP_1, is_touch=True)[0][0]

    assert 'Click' in mouse.instruction
    assert 'Tap' in touch.instruction


def test_compass_events_walk_the_sub_steps():
    tutorial = tutorial_for(PROP_1)
    session = start_session(PROP_1)
    cursor = TutorialCursor()

    pressed = compass_press(session, 'pt-A')
    for event in pressed.events:
        cursor = advance_tutorial(cursor, tutorial, event)
    assert cursor == TutorialCursor(0, 1)
    assert current_sub_step(cursor, tutorial).hint.type == 'arrow'

    dragged = compass_drag_to(pressed.session, 'pt-B')
    for event in dragged.events:
        cursor = advance_tutorial(cursor, tutorial, event)
    assert cursor == TutorialCursor(0, 2)
    assert current_sub_step(cursor, tutorial).hint.type == 'sweep'


def test_events_that_do_not_match_are_ignored():
    tutorial = tutorial_for(PROP_1)
    cursor = TutorialCursor()

    assert advance_tutorial(cursor, tutorial, ToolEvent('compass-phase', phase='radius-set')) == cursor
    assert advance_tutorial(cursor, tutorial, ToolEvent('macro-select', index=0)) == cursor


def test_last_sub_step_waits_for_the_stepper():
    tutorial = tutorial_for(PROP_1)
    cursor = TutorialCursor(0, 2)

    assert advance_tutorial(cursor, tutorial, ToolEvent('compass-phase', phase='sweeping')) == cursor


def test_macro_selection_advances_by_index():
    tutorial = tutorial_for(PROP_2)
    cursor = TutorialCursor(1, 0)

    cursor = advance_tutorial(cursor, tutorial, ToolEvent('macro-select', index=1))
    assert cursor == TutorialCursor(1, 0)

    cursor = advance_tutorial(cursor, tutorial, ToolEvent('macro-select', index=0))
    assert cursor == TutorialCursor(1, 1)


def test_sync_resets_on_step_change():
    cursor = TutorialCursor(0, 2)

    assert sync_tutorial(cursor, 0) is cursor
    assert sync_tutorial(cursor, 1) == TutorialCursor(1, 0)


def test_no_sub_step_past_the_end():
    tutorial = tutorial_for(PROP_1)

    assert current_sub_step(TutorialCursor(len(tutorial), 0), tutorial) is None


def test_straightedge_hint_points_from_start_to_end():
    tutorial = tutorial_for(PROP_1)
    step = PROP_1.steps[3].expected
    assert isinstance(step, StraightedgeAction)

    hint = tutorial[3][0].hint

    assert (hint.from_id, hint.to_id) == (step.from_id, step.to_id)
