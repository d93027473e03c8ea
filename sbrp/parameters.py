"""Run-time parameters of the heuristic."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Iterable

_DELIMITERS = re.compile(r"[ ;=]+")
_FLOAT_PREFIX = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"\s*[+-]?\d+")


@dataclass
class Parameters:
    """Settings read from the command line plus values derived while loading."""

    delta: float = 0.0
    epsilon: float = 0.0
    cmin: float = 0.0
    worst_scenario: int = -1
    opposite_scenario: int = -1
    iterations: int = -1
    instance_file: str | None = None
    instance_type: str | None = None

    def cmin_epsilon(self) -> float:
        """Unit recourse cost: ``ceil(cmin * epsilon)``."""
        return float(math.ceil(self.cmin * self.epsilon))


def _scan_float(text: str, default: float) -> float:
    match = _FLOAT_PREFIX.match(text)
    return float(match.group()) if match else default


def _scan_int(text: str, default: int) -> int:
    match = _INT_PREFIX.match(text)
    return int(match.group()) if match else default


def parse_parameters(argv: Iterable[str]) -> Parameters:
    """Build parameters from ``key=value`` arguments.

    Keys and values may be separated by spaces, ``;`` or ``=``. Arguments
    without a value and unknown keys are ignored; a value that does not start
    with a number leaves the numeric setting unchanged.
    """
    params = Parameters()
    for arg in argv:
        tokens = [token for token in _DELIMITERS.split(arg) if token]
        if len(tokens) < 2:
            continue
        key, value = tokens[0], tokens[1]
        if key == "instance_file":
            params.instance_file = value
        elif key == "epsilon":
            params.epsilon = _scan_float(value, params.epsilon)
        elif key == "delta":
            params.delta = _scan_float(value, params.delta)
        elif key == "instance_type":
            params.instance_type = value
        elif key == "iterations":
            params.iterations = _scan_int(value, params.iterations)
    return params