"""Repair operators that put unassigned customers back on routes."""

from __future__ import annotations

import abc
import heapq
from dataclasses import replace
from operator import attrgetter

from .lower_bound import driver_count
from .model import INFINITE, Driver, Move, Node, NodeType, Problem
from .route_feasibility import is_route_feasible, scenario_recourse_cost
from .solution import Solution


class InsertOperator(abc.ABC):
    """Tries to insert every unassigned customer of a solution."""

    @abc.abstractmethod
    def insert(self, solution: Solution) -> None:
        """Insert the unassigned customers where possible."""


class InsertionMethod:
    """Prices and applies the insertion of one customer into one route."""

    def __init__(self, problem: Problem) -> None:
        self.problem = problem

    def insertion_list(self, solution: Solution) -> list[Node]:
        """Snapshot of the customers waiting to be inserted."""
        return list(solution.unassigned)

    def insert_cost(self, solution: Solution, node: Node, driver: Driver) -> Move:
        """Cheapest feasible position for ``node`` in the route of ``driver``."""
        move = Move(node=node, to=driver)
        problem = solution.problem
        route = solution.path(driver)
        path = [route[0], node, *route[1:]]
        if driver_count(problem, path) >= 2:
            return move

        params = problem.parameters
        unit = params.cmin_epsilon()
        for pos, (prev, following) in enumerate(zip(route, route[1:])):
            delta = (
                solution.distance(prev, node)
                + solution.distance(node, following)
                - solution.distance(prev, following)
            )
            if prev.kind != NodeType.START_DEPOT:
                path[pos], path[pos + 1] = path[pos + 1], path[pos]
            if delta < move.delta_cost and is_route_feasible(problem, path):
                rec = scenario_recourse_cost(problem, path, params.worst_scenario) * unit
                if delta + rec < move.delta_cost:
                    move.delta_distance = delta
                    move.delta_cost = delta + rec
                    move.is_feasible = True
                    move.prev = prev
        return move

    def apply_insert_move(self, solution: Solution, move: Move) -> None:
        """Carry out ``move`` on ``solution``."""
        if move.node is None or move.prev is None:
            raise ValueError("move has no node or no insertion position")
        if move.source is not None:
            solution.remove(move.node)
        elif solution.is_unassigned(move.node):
            solution.remove_unassigned(move.node)
        solution.insert_after(move.node, move.prev)


class SequentialInsertion(InsertOperator):
    """Inserts customers one by one at their cheapest position."""

    def __init__(self, method: InsertionMethod) -> None:
        self.method = method

    def insert(self, solution: Solution) -> None:
        solution.update()
        refused: list[Node] = []
        for node in self.method.insertion_list(solution):
            best = Move()
            for driver in solution.drivers:
                move = self.method.insert_cost(solution, node, driver)
                if move.is_feasible and move.delta_cost < best.delta_cost:
                    best = move
            best.source = None
            if best.is_feasible:
                self.method.apply_insert_move(solution, best)
                solution.update_route(best.to)
            else:
                refused.append(node)
                solution.remove_unassigned(node)
        for node in refused:
            solution.add_unassigned(node)


class RegretInsertion:
    """Inserts first the customer that would lose most by waiting (k-regret)."""

    def __init__(self, problem: Problem, method: InsertionMethod) -> None:
        self.problem = problem
        self.method = method
        self.used_k = 2
        self._moves: dict[tuple[int, int], Move] = {}

    def _move(self, node: Node, driver: Driver) -> Move:
        return self._moves.setdefault((node.id, driver.id), Move(node=node, to=driver))

    def _price(self, solution: Solution, node: Node, driver: Driver) -> None:
        self._moves[(node.id, driver.id)] = self.method.insert_cost(solution, node, driver)

    def insert(self, solution: Solution, k: int = 2) -> None:
        """Insert unassigned customers using the ``k`` best routes of each."""
        if k < 1:
            raise ValueError("k must be at least 1")
        drivers = solution.drivers
        self.used_k = min(len(drivers), k)
        refused: list[Node] = []
        solution.update()
        for node in list(solution.unassigned):
            for driver in drivers:
                self._price(solution, node, driver)

        while solution.unassigned:
            best = Move()
            max_regret = -INFINITE
            rejected: list[Node] = []
            for node in list(solution.unassigned):
                regret, move = self.regret_cost(solution, node)
                if move.is_feasible and (
                    regret > max_regret
                    or (regret == max_regret and move.delta_cost < best.delta_cost)
                ):
                    max_regret = regret
                    best = move
                elif not move.is_feasible:
                    rejected.append(node)

            if best.is_feasible:
                best.source = None
                self.method.apply_insert_move(solution, best)
                solution.update_route(best.to)

            for node in rejected:
                refused.append(node)
                solution.remove_unassigned(node)

            if best.is_feasible:
                for node in list(solution.unassigned):
                    if self._move(node, best.to).is_feasible:
                        self._price(solution, node, best.to)

        for node in refused:
            solution.add_unassigned(node)

    def regret_cost(self, solution: Solution, node: Node) -> tuple[float, Move]:
        """Regret of ``node`` and a copy of its cheapest known move."""
        moves = [self._move(node, driver) for driver in solution.drivers]
        if not moves:
            return 0.0, Move(node=node)
        ranked = heapq.nsmallest(max(self.used_k, 1), moves, key=attrgetter("delta_cost"))
        first = ranked[0]
        regret = sum(m.delta_cost - first.delta_cost for m in ranked[1:])
        return regret, replace(first)


class RegretInsertionOperator(InsertOperator):
    """A regret insertion bound to a fixed ``k``."""

    def __init__(self, regret: RegretInsertion, k: int) -> None:
        self.regret = regret
        self.k = k

    def insert(self, solution: Solution) -> None:
        self.regret.insert(solution, self.k)