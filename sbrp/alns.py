"""Adaptive large neighbourhood search with simulated-annealing acceptance."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from .best_solutions import BestSolutionList
from .insertion import InsertOperator
from .removal import RemoveOperator
from .solution import Solution

_log = logging.getLogger(__name__)

T = TypeVar("T")

_WEIGHT_WINDOW = 0.05
_TEMPERATURE_FLOOR = 0.00000396
_RESTART_AFTER = 10000


@dataclass(eq=False)
class OperatorStats(Generic[T]):
    """Adaptive weight and score of one operator."""

    operator: T
    no: int = 0
    w: float = 0.0
    nb_selected: float = 1.0
    score: float = 1.0
    nb: int = 0
    interval1: float = 0.0
    interval2: float = 0.0


def _relative_gap(value: float, reference: float) -> float:
    if reference == 0:
        if value == reference:
            return math.nan
        return math.copysign(math.inf, value)
    return (value - reference) / reference


def _acceptance(current: float, candidate: float, temperature: float) -> float:
    diff = current - candidate
    if temperature == 0:
        exponent = math.nan if diff == 0 else math.copysign(math.inf, diff)
    else:
        exponent = diff / temperature
    try:
        return math.exp(exponent)
    except OverflowError:
        return math.inf


@dataclass(eq=False)
class ALNS:
    """Destroy-and-repair search that adapts the choice of operators."""

    iterations: int = 25000
    temperature: float = 0.9996
    percentage_max: float = 0.4
    percentage_min: float = 0.1
    max_removed: int = 60
    min_removed: int = 30
    sigma1: float = 4
    sigma2: float = 1
    sigma3: float = 0
    p: float = 0.05
    temperature_iter_init: float = 0
    acceptation_gap: float = 99999999
    max_time: int = 99999999
    chrono_check_iter: int = 1000
    rng: random.Random = field(default_factory=random.Random)
    insert_operators: list[OperatorStats[InsertOperator]] = field(default_factory=list, init=False)
    remove_operators: list[OperatorStats[RemoveOperator]] = field(default_factory=list, init=False)

    def add_insert_operator(self, operator: InsertOperator) -> None:
        self.insert_operators.append(OperatorStats(operator))

    def add_remove_operator(self, operator: RemoveOperator) -> None:
        self.remove_operators.append(OperatorStats(operator))

    def _reset(self) -> None:
        for stats in (*self.insert_operators, *self.remove_operators):
            stats.w = 0.0
            stats.nb_selected = 1.0
            stats.score = 1.0
            stats.nb = 0

    def _update_weights(self) -> None:
        for stats in (*self.insert_operators, *self.remove_operators):
            stats.w = stats.w * (1 - self.p) + stats.score / stats.nb_selected * self.p
            stats.nb_selected = 1.0
            stats.score = 0.0

    def _select(self, pool: list[OperatorStats[T]]) -> OperatorStats[T]:
        total = sum(stats.w for stats in pool)
        if total == 0:
            return pool[-1]
        interval = 0.0
        for stats in pool:
            stats.interval1 = interval
            interval += stats.w / total
            stats.interval2 = interval
        k = self.rng.random()
        for stats in pool:
            if stats.interval1 <= k <= stats.interval2:
                return stats
        return pool[-1]

    def _removal_count(self, assigned: int) -> int:
        most = min(self.max_removed, int(assigned * self.percentage_max))
        least = min(self.min_removed, int(assigned * self.percentage_min))
        if least == most:
            count = most
        elif most > 0:
            count = self.rng.randrange(most) + least
        else:
            count = least
        return min(max(count, 5), assigned)

    def optimize(
        self, solution: Solution, best_solutions: BestSolutionList | None = None
    ) -> Solution:
        """Improve ``solution`` and return the best solution found."""
        if not self.insert_operators or not self.remove_operators:
            raise ValueError("ALNS needs at least one insert and one remove operator")

        solution.update()
        best_cost = solution.cost()
        accepted = solution.copy()
        best = solution.copy()
        current = solution.copy()
        if best_solutions is not None and solution.is_feasible:
            best_solutions.add(solution)

        init_dist = solution.total_distances
        curr_cost = best_cost
        self._reset()

        since_best = 0
        t_min = init_dist * (1 + _WEIGHT_WINDOW) * self.temperature ** self.temperature_iter_init
        t_max = _TEMPERATURE_FLOOR
        temp = t_min
        _log.info(
            "ALNS it:%d Tmin:%.10f TMax:%.10f init_dist:%f T:%.10f",
            self.iterations, t_min, t_max, init_dist, self.temperature,
        )

        for iteration in range(self.iterations):
            assigned = len(accepted.customers) - accepted.unassigned_count
            count = self._removal_count(assigned)

            rmv = self._select(self.remove_operators)
            ins = self._select(self.insert_operators)
            ins.nb += 1
            rmv.nb += 1
            ins.nb_selected += 1
            rmv.nb_selected += 1

            rmv.operator.remove(current, count)
            ins.operator.insert(current)
            new_cost = current.cost()

            if iteration % 1000 == 0:
                _log.info(
                    "Iter:%d rmv:%d newcost:%.2f(%d,%d) cost:%.2f best:%.2f T:%.8f",
                    iteration, count, new_cost, current.unassigned_count,
                    int(current.is_feasible), curr_cost, best_cost, temp,
                )

            if best_solutions is not None and current.is_feasible:
                best_solutions.add(current)

            gap_best = _relative_gap(new_cost, best_cost)

            if best_cost > new_cost and current.is_feasible:
                since_best = 0
                best_cost = new_cost
                curr_cost = new_cost
                best = current.copy()
                accepted = current.copy()
                ins.score += self.sigma1
                rmv.score += self.sigma1
            else:
                since_best += 1
                prob = self.rng.random()
                if prob < _acceptance(curr_cost, new_cost, temp) and gap_best <= self.acceptation_gap:
                    accepted = current.copy()
                    reward = self.sigma2 if new_cost < curr_cost else self.sigma3
                    ins.score += reward
                    rmv.score += reward
                    curr_cost = new_cost
                else:
                    current = accepted.copy()

            if iteration % 100 == 0:
                self._update_weights()

            temp *= self.temperature
            if (temp < t_max or temp < 0.000001) and since_best >= _RESTART_AFTER:
                temp = t_min

        return best