"""Lower bounds on recourse cost and on the number of vehicles needed."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Sequence

from .model import Node, NodeType, Problem

RECOURSE_INFEASIBLE = 9999999999


class _Bounds(NamedTuple):
    demand: int
    lb_left: int
    ub_left: int
    lb_right: int
    ub_right: int

    def short_of(self, capacity: int) -> bool:
        return (
            self.ub_left + capacity < self.lb_right
            or self.lb_left > self.ub_right + capacity
        )


def _bounds(stations: Sequence[Node], scenario: int) -> _Bounds:
    demand = lb_left = ub_left = lb_right = ub_right = 0
    for node in stations:
        if node.kind != NodeType.CUSTOMER:
            continue
        d = node.demands[scenario]
        demand += d
        if d > 0:
            lb_left += d
            ub_left += d
        ub_left += node.w_minus
        if d < 0:
            lb_right -= d
            ub_right -= d
        ub_right += node.w_plus
    return _Bounds(demand, lb_left, ub_left, lb_right, ub_right)


def _depot_stations(problem: Problem) -> list[Node]:
    return [problem.nodes[-2], *problem.customers, problem.nodes[-1]]


def _positive_capacity(problem: Problem) -> int:
    unit = problem.drivers[0].capacity
    if unit <= 0:
        raise ValueError("vehicle capacity must be positive")
    return unit


def scenario_lower_bound(problem: Problem, stations: Sequence[Node], scenario: int) -> float:
    """Bikes that cannot be moved by the fleet in one scenario."""
    unit = problem.drivers[0].capacity
    bounds = _bounds(stations, scenario)
    capacity = unit
    while bounds.short_of(capacity):
        if unit <= 0:
            return float(RECOURSE_INFEASIBLE)
        capacity += unit
    return float(max(0, abs(bounds.demand) - capacity))


def driver_count(problem: Problem, stations: Sequence[Node] | None = None) -> int:
    """Minimum number of vehicles that can balance the stations in every scenario."""
    if stations is None:
        stations = problem.customers
    unit = problem.drivers[0].capacity
    drivers = 1
    for e in range(len(problem.scenarios)):
        capacity = unit * drivers
        bounds = _bounds(stations, e)
        while bounds.short_of(capacity):
            _positive_capacity(problem)
            capacity += unit
            drivers += 1
    return drivers


def set_worst_scenario(problem: Problem) -> tuple[int, float]:
    """Record the scenario with the largest lower bound and return it with its bound."""
    stations = _depot_stations(problem)
    worst_cost = -1.0
    worst = -1
    for e in range(len(problem.scenarios)):
        cost = scenario_lower_bound(problem, stations, e)
        if cost > worst_cost:
            worst_cost = cost
            worst = e
    problem.parameters.worst_scenario = worst
    return worst, worst_cost


def sort_from_worst_scenarios(problem: Problem) -> list[int]:
    """Append scenarios to the problem's sorted list, largest lower bound first."""
    stations = _depot_stations(problem)
    bounds = [scenario_lower_bound(problem, stations, e) for e in range(len(problem.scenarios))]
    order = sorted(range(len(bounds)), key=lambda e: -bounds[e])
    for e in order:
        problem.add_sorted_scenario(e)
    return order


@dataclass
class RecourseLowerBound:
    """Averaged recourse lower bound with details of the last calculation."""

    l1: float = 0.0
    l2: float = 0.0
    time_taken_l1: float = 0.0
    time_taken_l2: float = 0.0
    feasible: bool = True
    inf_scenario: int = -1
    nb_drivers: int = 0

    def calculate(self, problem: Problem, stations: Sequence[Node] | None = None) -> float:
        """Mean scenario bound times the unit recourse cost."""
        if stations is None:
            stations = _depot_stations(problem)
        self.feasible = True
        self.time_taken_l1 = self.time_taken_l2 = 0.0
        self.l1 = self.l2 = 0.0
        self.inf_scenario = -1

        total = 0.0
        for e in range(len(problem.scenarios)):
            bound = scenario_lower_bound(problem, stations, e)
            if bound >= RECOURSE_INFEASIBLE:
                total = float(RECOURSE_INFEASIBLE)
                self.feasible = False
                self.inf_scenario = e
                break
            total += bound
        self.l1 = total / len(problem.scenarios)
        return self.l1 * problem.parameters.cmin_epsilon()

    def calculate_with_min_driver_count(
        self, problem: Problem, stations: Sequence[Node] | None = None
    ) -> float:
        """Bound using one fleet size that is large enough for every scenario."""
        if stations is None:
            stations = problem.customers
        count = len(problem.scenarios)
        all_bounds = [_bounds(stations, e) for e in range(count)]
        unit = problem.drivers[0].capacity
        drivers = 1
        for bounds in all_bounds:
            while bounds.short_of(unit * drivers):
                _positive_capacity(problem)
                drivers += 1
        lb = sum(max(0, abs(b.demand) - unit * drivers) for b in all_bounds) / count
        return lb * problem.parameters.cmin_epsilon()