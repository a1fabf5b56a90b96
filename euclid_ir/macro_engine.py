"""Macro invocation: closed-form result plus ghost geometry."""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

from .facts import FactStore
from .ghost import compute_macro_ghost
from .logging_utils import apply_debug_logging
from .macros import MACRO_REGISTRY, MacroResult
from .types import ConstructionState, IntersectionCandidate

logger = logging.getLogger(__name__)


def execute_macro(
    prop_id: int,
    state: ConstructionState,
    input_ids: Sequence[str],
    candidates: Sequence[IntersectionCandidate],
    store: FactStore,
    at_step: int,
    extend_segments: bool = False,
    output_labels: Optional[Mapping[str, str]] = None,
) -> MacroResult:
    """Run macro ``prop_id`` against ``state`` and attach its ghost layers.

    Unknown macros and unresolvable inputs give an empty result with the
    state untouched. Facts are appended to ``store`` in the order they appear
    in ``result.new_facts``.
    """

    macro = MACRO_REGISTRY.get(prop_id)
    if macro is None:
        logger.debug("No macro registered for I.%d", prop_id)
        return MacroResult(state=state, candidates=list(candidates))
    result = macro.execute(state, input_ids, candidates, store, at_step, extend_segments, output_labels)
    if not result.added_elements:
        logger.debug("Macro I.%d produced nothing for inputs %s", prop_id, list(input_ids))
        return result
    result.ghost_layers = compute_macro_ghost(prop_id, input_ids, state, at_step)
    return result


apply_debug_logging(globals(), logger=logger)
