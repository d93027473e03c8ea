"""Readers for the instance file formats."""

from __future__ import annotations

import logging
import math
import os
import sys
from pathlib import Path
from typing import Union

from .model import Driver, Node, NodeType, Problem
from .parameters import Parameters

PathLike = Union[str, "os.PathLike[str]"]

_log = logging.getLogger(__name__)


class LoadError(Exception):
    """Raised when an instance file cannot be read or describes a bad instance."""


class _Tokens:
    """Whitespace-separated numbers read one at a time."""

    def __init__(self, text: str, source: str) -> None:
        self._items = iter(text.split())
        self._source = source

    def _next(self, what: str) -> str:
        try:
            return next(self._items)
        except StopIteration:
            raise LoadError(f"{self._source}: unexpected end of file while reading {what}") from None

    def int(self, what: str) -> int:
        token = self._next(what)
        try:
            return int(token)
        except ValueError:
            raise LoadError(f"{self._source}: expected an integer for {what}, got {token!r}") from None

    def float(self, what: str) -> float:
        token = self._next(what)
        try:
            return float(token)
        except ValueError:
            raise LoadError(f"{self._source}: expected a number for {what}, got {token!r}") from None

    def ints(self, count: int, what: str) -> list[int]:
        return [self.int(what) for _ in range(count)]

    def floats(self, count: int, what: str) -> list[float]:
        return [self.float(what) for _ in range(count)]


def _read(path: PathLike) -> _Tokens:
    try:
        text = Path(path).read_text()
    except OSError as exc:
        raise LoadError(f"Error in the input filename: {path}") from exc
    return _Tokens(text, str(path))


def _build(
    stations: int,
    capacities: list[int],
    occupancies: list[int],
    demands_of: list[list[int]],
    scenarios: int,
    fleet_size: int,
    vehicle_capacity: int,
    distances: list[list[float]],
    parameters: Parameters,
) -> Problem:
    """Assemble a problem; ``demands_of[s]`` holds the scenario demands of station ``s``."""
    if stations < 1:
        raise LoadError("an instance needs at least the depot station")
    if fleet_size < 1:
        raise LoadError("an instance needs at least one vehicle")

    problem = Problem(parameters=parameters)
    for i in range(stations - 1):
        node = Node(
            id=i,
            no=i + 1,
            dist_id=i + 1,
            kind=NodeType.CUSTOMER,
            occupancy=occupancies[i + 1],
            station_capacity=capacities[i + 1],
            demands=list(demands_of[i + 1]),
        )
        node.update_w(parameters.delta)
        problem.add_node(node)

    for e in range(scenarios):
        problem.add_scenario(e)

    for i in range(fleet_size):
        start = Node(
            id=stations - 1 + i * 2,
            no=0,
            dist_id=0,
            kind=NodeType.START_DEPOT,
            occupancy=occupancies[0],
            station_capacity=capacities[0],
        )
        end = Node(
            id=stations + i * 2,
            no=0,
            dist_id=0,
            kind=NodeType.END_DEPOT,
            occupancy=occupancies[0],
            station_capacity=capacities[0],
        )
        problem.add_node(start)
        problem.add_node(end)
        problem.add_driver(
            Driver(
                id=i,
                start_node_id=start.id,
                end_node_id=end.id,
                capacity=vehicle_capacity,
            )
        )

    for node in problem.nodes[: stations - 1]:
        problem.add_customer(node)

    problem.distances = [
        [0.0 if i == j else float(value) for j, value in enumerate(row)]
        for i, row in enumerate(distances)
    ]
    return problem


def load_pcg(path: PathLike, parameters: Parameters | None = None) -> Problem:
    """Read an instance in the ``pcg`` format; one vehicle per station."""
    if parameters is None:
        parameters = Parameters()
    tokens = _read(path)

    capacity = tokens.int("vehicle capacity")
    stations = tokens.int("station count")
    _log.info("Q: %d N: %d", capacity, stations)
    capacities = tokens.ints(stations, "station capacities")
    occupancies = tokens.ints(stations, "occupancies")
    scenarios = tokens.int("scenario count")
    _log.info("Scenarios: %d", scenarios)
    demands = [tokens.ints(scenarios, "demands") for _ in range(stations)]
    distances = [tokens.floats(stations, "distances") for _ in range(stations)]

    c_min = sys.float_info.max
    origin = target = -1
    for i in range(stations):
        for j in range(stations):
            if i != j:
                c_min = min(c_min, distances[i][j])
                origin, target = i, j
    if c_min < 1.0:
        raise LoadError(
            f"c_min: {c_min:.1f} At least two stations are stacked on top. "
            f"From:{origin} to:{target}"
        )

    # The running sum is an integer, as in the reference format description.
    total = 0
    count = 0
    for row in distances:
        for value in row:
            total = math.trunc(total + value)
            count += 1
    c_avg = total / count if count else 0.0
    _log.info("c_min:%.1f from:%d to:%d c_avg:%.1f", c_min, origin, target, c_avg)
    parameters.cmin = c_min

    return _build(
        stations,
        capacities,
        occupancies,
        demands,
        scenarios,
        stations,
        capacity,
        distances,
        parameters,
    )


def load_dins(path: PathLike, parameters: Parameters | None = None) -> Problem:
    """Read an instance in the ``dins`` format."""
    if parameters is None:
        parameters = Parameters()
    tokens = _read(path)

    stations = tokens.int("station count")
    capacities = tokens.ints(stations, "station capacities")
    occupancies = tokens.ints(stations, "occupancies")
    scenarios = tokens.int("scenario count")
    tokens.floats(scenarios, "scenario probabilities")
    by_scenario = [tokens.ints(stations, "demands") for _ in range(scenarios)]
    fleet_size = tokens.int("fleet size")
    vehicle_capacity = tokens.int("vehicle capacity")
    distances = [tokens.floats(stations, "distances") for _ in range(stations)]

    positive = [value for row in distances for value in row if value > 0]
    parameters.cmin = min(positive, default=sys.float_info.max)

    demands = [[by_scenario[e][s] for e in range(scenarios)] for s in range(stations)]
    return _build(
        stations,
        capacities,
        occupancies,
        demands,
        scenarios,
        fleet_size,
        vehicle_capacity,
        distances,
        parameters,
    )