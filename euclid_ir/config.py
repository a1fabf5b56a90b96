"""Numeric tolerances shared by the construction engine."""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass


@dataclass
class EngineConfig:
    # circles closer than this to tangency are treated as tangent
    tangency_eps: float = 1e-9
    # two candidates (or a candidate and a point) closer than this coincide
    candidate_tolerance: float = 1e-3
    # a compass gesture commits once its absolute sweep reaches this angle
    sweep_threshold: float = 2.0 * math.pi - 0.26
    # lengths below this are degenerate (e.g. a zero direction vector)
    degenerate_length: float = 1e-9


_ENGINE_CONFIG = EngineConfig()


def get_engine_config() -> EngineConfig:
    return copy.deepcopy(_ENGINE_CONFIG)


def set_engine_config(config: EngineConfig) -> None:
    global _ENGINE_CONFIG
    _ENGINE_CONFIG = copy.deepcopy(config)
