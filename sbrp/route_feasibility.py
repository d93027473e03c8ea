"""Feasibility and expected recourse cost of a single route."""

from __future__ import annotations

from typing import Sequence

from .model import Node, NodeType, Problem

BIG_M = 9999


def is_route_feasible(problem: Problem, path: Sequence[Node]) -> bool:
    """True when the route can serve every scenario, worst scenarios first."""
    order = problem.sorted_scenarios or range(len(problem.scenarios))
    return all(is_feasible_for_scenario(problem, path, e) for e in order)


def is_feasible_for_scenario(problem: Problem, path: Sequence[Node], scenario: int) -> bool:
    """True when the load window of the route never becomes empty."""
    capacity = problem.drivers[0].capacity
    min_lambda = sum_lambda = 0
    max_mu = sum_mu = 0
    for node in path:
        if node.kind != NodeType.CUSTOMER:
            continue
        demand = node.demands[scenario]
        sum_lambda += max(-capacity, demand - node.w_plus)
        min_lambda = min(sum_lambda, min_lambda)
        sum_mu += min(capacity, demand + node.w_minus)
        max_mu = max(sum_mu, max_mu)
        if sum_lambda - min_lambda > sum_mu + capacity - max_mu:
            return False
    return True


def _stage(following: list[int], demand: int, w_plus: int, w_minus: int, capacity: int) -> list[int]:
    stage = []
    for q in range(capacity + 1):
        best = BIG_M
        for u in range(w_plus + 1):
            load = q + demand - u
            if 0 <= load <= capacity:
                best = min(best, u + following[load])
        for u in range(w_minus + 1):
            load = q + demand + u
            if 0 <= load <= capacity:
                best = min(best, u + following[load])
        stage.append(best)
    return stage


def _scenario_cost(path: Sequence[Node], scenario: int, capacity: int) -> int:
    costs = [0] * (capacity + 1)
    for node in reversed(path[1:-1]):
        costs = _stage(costs, node.demands[scenario], node.w_plus, node.w_minus, capacity)
    return min(costs, default=BIG_M)


def recourse_cost(problem: Problem, path: Sequence[Node]) -> float:
    """Average recourse over all scenarios, scaled by the unit recourse cost."""
    capacity = problem.drivers[0].capacity
    count = len(problem.scenarios)
    total = sum(_scenario_cost(path, e, capacity) for e in range(count))
    return (total / count) * problem.parameters.cmin_epsilon()


def scenario_recourse_cost(problem: Problem, path: Sequence[Node], scenario: int) -> float:
    """Minimum number of extra bikes moved along the route in one scenario."""
    return float(_scenario_cost(path, scenario, problem.drivers[0].capacity))