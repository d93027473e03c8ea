"""A bounded list of the best distinct solutions found."""

from __future__ import annotations

from typing import Iterator, Protocol

from .model import Problem
from .solution import Solution


class _RelatedFunction(Protocol):
    def increase(self, solution: Solution) -> None: ...

    def decrease(self, solution: Solution) -> None: ...


class BestSolutionList:
    """Copies of solutions sorted by their last computed cost, cheapest first."""

    def __init__(self, problem: Problem, max_count: int) -> None:
        self.problem = problem
        self.max_count = max_count
        self._solutions: list[Solution] = []
        self._related: list[_RelatedFunction] = []

    def __len__(self) -> int:
        return len(self._solutions)

    def __iter__(self) -> Iterator[Solution]:
        return iter(self._solutions)

    @property
    def solutions(self) -> list[Solution]:
        return list(self._solutions)

    def add_related(self, function: _RelatedFunction) -> None:
        """Register a function told about every solution entering or leaving."""
        self._related.append(function)

    def add(self, solution: Solution) -> None:
        """Store a copy of ``solution`` unless it is no better than the kept ones."""
        cost = solution.last_cost
        if len(self._solutions) == self.max_count:
            worst = self._solutions[-1]
            if worst.last_cost <= cost:
                return
            self._solutions.pop()
            for function in self._related:
                function.decrease(worst)

        for function in self._related:
            function.increase(solution)

        for position, kept in enumerate(self._solutions):
            if cost == kept.last_cost:
                return
            if cost < kept.last_cost:
                self._solutions.insert(position, solution.copy())
                return
        self._solutions.append(solution.copy())

    def merge(self, other: BestSolutionList) -> None:
        """Take over the solutions and capacity of ``other``, leaving it empty."""
        self.max_count += other.max_count
        self._solutions.extend(other._solutions)
        other._solutions.clear()

    def solution(self, i: int) -> Solution:
        """The ``i``-th best solution, counting from 1."""
        index = max(i, 1) - 1
        if index >= len(self._solutions):
            raise IndexError(f"no solution number {i}")
        return self._solutions[index]

    def resize(self, size: int) -> None:
        if size < len(self._solutions):
            raise ValueError(
                "Cannot resize this list to a smaller size. "
                f"Current size:{len(self._solutions)} new size:{size}"
            )
        self.max_count = size

    def describe(self) -> str:
        lines = [f"List of best solutions count:{len(self._solutions)}"]
        lines.extend(f"i:{i} cost:{s.last_cost:.3f}" for i, s in enumerate(self._solutions))
        return "\n".join(lines)