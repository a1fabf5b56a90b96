"""DEBUG tracing for the engine's module-level functions.

Modules call :func:`apply_debug_logging` on their own ``globals()`` after
defining their functions. Nothing is logged unless the module logger is
enabled for DEBUG, and construction states, fact stores and sessions are
logged as short summaries rather than full reprs.
"""

from __future__ import annotations

import inspect
import logging
import reprlib
from functools import wraps
from typing import Any, Callable, Iterable, Mapping, MutableMapping, Optional, Sequence, TypeVar, cast

import numpy as np

F = TypeVar("F", bound=Callable[..., Any])

MAX_ITEMS = 5
MAX_LENGTH = 400

_WRAPPED_MARKER = "_euclid_debug_wrapped"

_repr = reprlib.Repr()
_repr.maxother = 160
_repr.maxlist = 10
_repr.maxtuple = 10


def _count_kinds(elements: Iterable[Any]) -> str:
    counts: dict = {}
    for element in elements:
        kind = getattr(element, "kind", type(element).__name__)
        counts[kind] = counts.get(kind, 0) + 1
    return ", ".join(f"{kind}s={count}" for kind, count in sorted(counts.items())) or "empty"


def _summarize(value: Any) -> Optional[str]:
    if isinstance(value, np.ndarray):
        text = f"ndarray(shape={tuple(value.shape)}, dtype={value.dtype}"
        if 0 < value.size <= MAX_ITEMS:
            text += f", values={_repr.repr(value.tolist())}"
        elif value.size > MAX_ITEMS:
            text += f", min={float(value.min()):.6g}, max={float(value.max()):.6g}"
        return text + ")"

    # Duck-typed: the engine's types import this module.
    if hasattr(value, "tool_phase") and hasattr(value, "current_step"):
        return (
            f"ProofSession(I.{value.prop.id}, step={value.current_step}, "
            f"phase={type(value.tool_phase).__name__}, completed={value.completed})"
        )
    if hasattr(value, "next_label_index") and isinstance(getattr(value, "elements", None), tuple):
        return f"ConstructionState({_count_kinds(value.elements)}, next_label={value.next_label_index})"
    if hasattr(value, "next_id") and isinstance(getattr(value, "facts", None), list):
        return f"FactStore(facts={len(value.facts)})"
    return None


def _short(value: Any) -> str:
    summary = _summarize(value)
    if summary is not None:
        return summary

    if isinstance(value, Mapping):
        shown = [f"{_short(key)}: {_short(val)}" for key, val in list(value.items())[:MAX_ITEMS]]
        if len(value) > MAX_ITEMS:
            shown.append("...")
        return "{" + ", ".join(shown) + "}"

    if isinstance(value, (list, tuple)):
        shown = [_short(item) for item in value[:MAX_ITEMS]]
        if len(value) > MAX_ITEMS:
            shown.append(f"... {len(value) - MAX_ITEMS} more")
        body = ", ".join(shown)
        return f"({body})" if isinstance(value, tuple) else f"[{body}]"

    rendered = _repr.repr(value)
    if len(rendered) > MAX_LENGTH:
        rendered = rendered[:MAX_LENGTH] + "... (truncated)"
    return rendered


def _call_signature(args: Sequence[Any], kwargs: Mapping[str, Any]) -> str:
    rendered = [_short(arg) for arg in args]
    rendered.extend(f"{key}={_short(value)}" for key, value in kwargs.items())
    return ", ".join(rendered)


def debug_log_call(logger: logging.Logger, *, name: Optional[str] = None, log_result: bool = True) -> Callable[[F], F]:
    """Decorate ``func`` so each call logs its arguments and result at DEBUG."""

    def decorator(func: F) -> F:
        if getattr(func, _WRAPPED_MARKER, False):
            return func
        label = name or func.__qualname__

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            if not logger.isEnabledFor(logging.DEBUG):
                return func(*args, **kwargs)
            logger.debug("-> %s(%s)", label, _call_signature(args, kwargs))
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                logger.debug("!! %s raised %s: %s", label, type(exc).__name__, exc)
                raise
            if log_result:
                logger.debug("<- %s = %s", label, _short(result))
            else:
                logger.debug("<- %s", label)
            return result

        setattr(wrapper, _WRAPPED_MARKER, True)
        return cast(F, wrapper)

    return decorator


def apply_debug_logging(
    namespace: MutableMapping[str, Any],
    *,
    logger: Optional[logging.Logger] = None,
    skip: Optional[Iterable[str]] = None,
) -> None:
    """Wrap every function defined in ``namespace``'s module with :func:`debug_log_call`.

    Imported functions and classes are left untouched.
    """

    module_name = namespace.get("__name__", __name__)
    logger = logger or logging.getLogger(module_name)
    skipped = set(skip or ())

    for attr, value in list(namespace.items()):
        if attr in skipped or not inspect.isfunction(value):
            continue
        if value.__module__ != module_name:
            continue
        namespace[attr] = debug_log_call(logger, name=attr)(value)
