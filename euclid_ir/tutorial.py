"""Guided tutorial cursor driven by stepper tool events."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .stepper import ToolEvent
from .types import CompassPhaseTrigger, MacroSelectTrigger, PropositionDef, TutorialSubStep

logger = logging.getLogger(__name__)

Tutorial = List[List[TutorialSubStep]]


@dataclass(frozen=True)
class TutorialCursor:
    step_index: int = 0
    sub_step_index: int = 0


def tutorial_for(prop: PropositionDef, is_touch: bool = False) -> Tutorial:
    if prop.get_tutorial is None:
        return []
    tutorial = prop.get_tutorial(is_touch)
    if len(tutorial) != len(prop.steps):
        logger.warning(
            "Tutorial for I.%d has %d step(s) but the proposition has %d",
            prop.id,
            len(tutorial),
            len(prop.steps),
        )
    return tutorial


def current_sub_step(cursor: TutorialCursor, tutorial: Sequence[Sequence[TutorialSubStep]]) -> Optional[TutorialSubStep]:
    if cursor.step_index >= len(tutorial):
        return None
    sub_steps = tutorial[cursor.step_index]
    if not sub_steps:
        return None
    return sub_steps[min(cursor.sub_step_index, len(sub_steps) - 1)]


def _matches(sub_step: TutorialSubStep, event: ToolEvent) -> bool:
    trigger = sub_step.advance_on
    if isinstance(trigger, CompassPhaseTrigger):
        return event.kind == "compass-phase" and event.phase == trigger.phase
    if isinstance(trigger, MacroSelectTrigger):
        return event.kind == "macro-select" and event.index == trigger.index
    return False


def advance_tutorial(
    cursor: TutorialCursor,
    tutorial: Sequence[Sequence[TutorialSubStep]],
    event: ToolEvent,
) -> TutorialCursor:
    """Move to the next sub-step when ``event`` is what the current one waits for."""

    sub_step = current_sub_step(cursor, tutorial)
    if sub_step is None or not _matches(sub_step, event):
        return cursor
    last = len(tutorial[cursor.step_index]) - 1
    return TutorialCursor(cursor.step_index, min(cursor.sub_step_index + 1, last))


def sync_tutorial(cursor: TutorialCursor, step_index: int) -> TutorialCursor:
    if cursor.step_index == step_index:
        return cursor
    return TutorialCursor(step_index, 0)
