import logging

import numpy as np
import pytest

from euclid_ir.construction import add_point, create_initial_state
from euclid_ir.facts import create_fact_store
from euclid_ir.logging_utils import apply_debug_logging, debug_log_call

logger = logging.getLogger('tests.logging_utils')


def _double(value):
    return value * 2


def _explode():
    raise ValueError('boom')


def test_calls_are_traced_at_debug(caplog):
    wrapped = debug_log_call(logger, name='double')(_double)

    with caplog.at_level(logging.DEBUG, logger='tests.logging_utils'):
        assert wrapped(21) == 42

    assert caplog.messages == ['-> double(21)', '<- double = 42']


def test_nothing_is_logged_above_debug(caplog):
    wrapped = debug_log_call(logger)(_double)

    with caplog.at_level(logging.INFO, logger='tests.logging_utils'):
        assert wrapped(2) == 4

    assert caplog.messages == []


def test_exceptions_propagate_and_are_traced(caplog):
    wrapped = debug_log_call(logger, name='explode')(_explode)

    with caplog.at_level(logging.DEBUG, logger='tests.logging_utils'):
        with pytest.raises(ValueError, match='boom'):
            wrapped()

    assert caplog.messages[-1] == '!! explode raised ValueError: boom'


def test_wrapping_is_idempotent():
    once = debug_log_call(logger)(_double)

    assert debug_log_call(logger)(once) is once


def test_engine_objects_are_summarized(caplog):
    state = create_initial_state()
    state, _ = add_point(state, 0.0, 0.0, 'given', 'A')
    wrapped = debug_log_call(logger, name='identity')(lambda *args: None)

    with caplog.at_level(logging.DEBUG, logger='tests.logging_utils'):
        wrapped(state, create_fact_store(), np.zeros((3, 2)))

    assert caplog.messages[0] == (
        '-> identity(ConstructionState(points=1, next_label=1), FactStore(facts=0), '
        'ndarray(shape=(3, 2), dtype=float64, min=0, max=0))'
    )


def test_long_sequences_are_truncated(caplog):
    wrapped = debug_log_call(logger, name='identity')(lambda items: None)

    with caplog.at_level(logging.DEBUG, logger='tests.logging_utils'):
        wrapped(list(range(8)))

    assert caplog.messages[0] == '-> identity([0, 1, 2, 3, 4, ... 3 more])'


def test_apply_debug_logging_skips_imported_and_listed_functions():
    namespace = {
        '__name__': __name__,
        '_double': _double,
        '_explode': _explode,
        'imported': np.zeros,
    }

    apply_debug_logging(namespace, logger=logger, skip={'_explode'})

    assert namespace['_double'] is not _double
    assert namespace['_double'](3) == 6
    assert namespace['_explode'] is _explode
    assert namespace['imported'] is np.zeros
