"""Destroy operators that take customers out of their routes."""

from __future__ import annotations

import abc
import random
from typing import Sequence

from .model import Node
from .solution import Solution

RELATEDNESS_POWER = 6


class RemoveOperator(abc.ABC):
    """Takes a number of customers off their routes and marks them unassigned."""

    @abc.abstractmethod
    def remove(self, solution: Solution, count: int) -> None:
        """Remove ``count`` customers."""


def _assigned_customers(solution: Solution) -> list[Node]:
    return [n for n in solution.customers if solution.assigned_to[n.id] is not None]


class RandomRemoval(RemoveOperator):
    """Removes customers chosen uniformly at random."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng if rng is not None else random.Random()

    def remove(self, solution: Solution, count: int) -> None:
        candidates = _assigned_customers(solution)
        total = len(candidates)
        for i in range(min(count, total)):
            index = self.rng.randrange(total - i)
            solution.remove_and_unassign(candidates[index])
            candidates[index] = candidates[total - i - 1]


class RelatednessRemoval(RemoveOperator):
    """Removes customers close to those already removed."""

    def __init__(self, matrix: Sequence[Sequence[float]], rng: random.Random | None = None) -> None:
        self.matrix = matrix
        self.rng = rng if rng is not None else random.Random()
        self.remembered = 0

    def relatedness(self, a: Node, b: Node) -> float:
        return self.matrix[a.dist_id][b.dist_id]

    def remove(self, solution: Solution, count: int) -> None:
        candidates = _assigned_customers(solution)
        removed = [n for n in solution.customers if solution.assigned_to[n.id] is None]
        if len(candidates) <= 1:
            return

        size = len(candidates) - 1
        index = self.rng.randrange(len(candidates))
        solution.remove_and_unassign(candidates[index])
        removed.append(candidates[index])
        candidates[index] = candidates[size]

        for _ in range(min(count - 1, len(candidates) - 2)):
            selected = removed[self.rng.randrange(len(removed))]
            candidates[:size] = sorted(
                candidates[:size], key=lambda n: self.relatedness(n, selected)
            )
            index = int(size * self.rng.random() ** RELATEDNESS_POWER)
            if index >= size:
                index -= 1
            solution.remove_and_unassign(candidates[index])
            removed.append(candidates[index])
            candidates[index] = candidates[size - 1]
            size -= 1

    def increase(self, solution: Solution) -> None:
        """Count a solution that entered a list of good solutions."""
        self.remembered += 1

    def decrease(self, solution: Solution) -> None:
        """Forget a solution that left a list of good solutions."""
        if self.remembered > 0:
            self.remembered -= 1