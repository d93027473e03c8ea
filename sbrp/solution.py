"""Routes of a solution and the function that prices them."""

from __future__ import annotations

import copy as _copy
from typing import Iterable, Union

from .model import INF_ROUTE_COST, UNASSIGNED_COST, Driver, Node, NodeType, Problem
from .route_feasibility import is_route_feasible, recourse_cost

DriverRef = Union[Driver, int]


class CostFunction:
    """Distance plus expected recourse of every route, plus unassigned penalties."""

    @staticmethod
    def _walk(solution: Solution, driver: Driver) -> tuple[list[Node], float]:
        node = solution.problem.nodes[driver.start_node_id]
        path: list[Node] = []
        dist = 0.0
        while node.kind != NodeType.END_DEPOT:
            following = solution.next_nodes[node.id]
            if following is None:
                raise ValueError(f"route of driver {driver.id} is broken after node {node.id}")
            dist += solution.distance(node, following)
            path.append(node)
            node = following
        path.append(node)
        return path, dist

    def cost(self, solution: Solution) -> float:
        total = sum(self.route_cost(solution, d) for d in solution.problem.drivers)
        return total + solution.unassigned_count * UNASSIGNED_COST

    def route_cost(self, solution: Solution, driver: Driver) -> float:
        path, dist = self._walk(solution, driver)
        if not is_route_feasible(solution.problem, path):
            return INF_ROUTE_COST
        return dist + recourse_cost(solution.problem, path)

    def update(self, solution: Solution) -> None:
        total_distance = total_recourse = 0.0
        for driver in solution.problem.drivers:
            self.update_route(solution, driver)
            total_distance += driver.cur_distance
            total_recourse += driver.cur_recourse
        solution.total_distances = total_distance
        solution.total_recourse = total_recourse

    def update_route(self, solution: Solution, driver: Driver) -> None:
        path, dist = self._walk(solution, driver)
        driver.cur_distance = dist
        driver.cur_recourse = recourse_cost(solution.problem, path)

    def describe_route(self, solution: Solution, driver: Driver) -> str:
        self.route_cost(solution, driver)
        head = (
            f"Route:{driver.id} cost:{driver.cur_distance:.2f} "
            f"rec:{driver.cur_recourse:.2f} len:{solution.route_lengths[driver.id]}:"
        )
        ids = "".join(f"{node.id}-" for node in solution.path(driver))
        return head + ids


class Solution:
    """Doubly linked routes over the nodes of a problem plus the unassigned customers."""

    def __init__(self, problem: Problem, cost_function: CostFunction | None = None) -> None:
        self.problem = problem
        self.cost_function = cost_function if cost_function is not None else CostFunction()
        count = len(problem.nodes)
        self.next_nodes: list[Node | None] = [None] * count
        self.prev_nodes: list[Node | None] = [None] * count
        self.assigned_to: list[Driver | None] = [None] * count
        self.route_lengths: list[int] = [0] * len(problem.drivers)
        self._unassigned: list[Node] = []
        self._unassigned_index: list[int] = [-1] * count
        self.show_output = True
        self.last_cost = 0.0
        self.is_feasible = True
        self.total_distances = 0.0
        self.total_recourse = 0.0

        for driver in problem.drivers:
            start = problem.nodes[driver.start_node_id]
            end = problem.nodes[driver.end_node_id]
            self.next_nodes[start.id] = end
            self.prev_nodes[end.id] = start
            self.assigned_to[start.id] = driver
            self.assigned_to[end.id] = driver

    # -- structure ---------------------------------------------------------

    @property
    def unassigned(self) -> list[Node]:
        """Unassigned customers in their current order; do not modify."""
        return self._unassigned

    @property
    def unassigned_count(self) -> int:
        return len(self._unassigned)

    @property
    def customers(self) -> list[Node]:
        return self.problem.customers

    @property
    def drivers(self) -> list[Driver]:
        return self.problem.drivers

    def _driver(self, driver: DriverRef) -> Driver:
        return self.problem.drivers[driver] if isinstance(driver, int) else driver

    def insert_after(self, node: Node, prev: Node) -> None:
        """Put ``node`` right after ``prev`` in the route ``prev`` belongs to."""
        owner = self.assigned_to[prev.id]
        if owner is None:
            raise ValueError(f"node {prev.id} is not on a route")
        self.route_lengths[owner.id] += 1
        self.assigned_to[node.id] = owner
        following = self.next_nodes[prev.id]
        self.next_nodes[node.id] = following
        self.prev_nodes[node.id] = prev
        if following is not None:
            self.prev_nodes[following.id] = node
        self.next_nodes[prev.id] = node

    def remove(self, node: Node) -> None:
        """Unlink ``node`` from its route."""
        owner = self.assigned_to[node.id]
        if owner is None:
            raise ValueError(f"node {node.id} is not on a route")
        self.route_lengths[owner.id] -= 1
        following = self.next_nodes[node.id]
        preceding = self.prev_nodes[node.id]
        if following is not None:
            self.prev_nodes[following.id] = preceding
        if preceding is not None:
            self.next_nodes[preceding.id] = following
        self.assigned_to[node.id] = None

    def add_unassigned(self, node: Node) -> None:
        self._unassigned_index[node.id] = len(self._unassigned)
        self._unassigned.append(node)

    def remove_unassigned(self, node: Node) -> None:
        """Drop ``node`` from the unassigned list; the last entry takes its place."""
        index = self._unassigned_index[node.id]
        if index == -1:
            raise ValueError(f"node {node.id} is not unassigned")
        last = self._unassigned.pop()
        if last is not node:
            self._unassigned[index] = last
            self._unassigned_index[last.id] = index
        self._unassigned_index[node.id] = -1

    def remove_and_unassign(self, node: Node) -> None:
        self.remove(node)
        self.add_unassigned(node)

    def unassign_all(self) -> None:
        """Append every customer to the unassigned list."""
        for node in self.problem.customers:
            self.add_unassigned(node)

    def make_path(self, driver_index: int, path: Iterable[Node]) -> None:
        """Rebuild the route of a driver from the customers of ``path``, in order."""
        driver = self.problem.drivers[driver_index]
        prev = self.problem.nodes[driver.start_node_id]
        for node in path:
            if node.kind != NodeType.CUSTOMER:
                continue
            if self.assigned_to[node.id] is not None:
                self.remove(node)
            if self._unassigned_index[node.id] != -1:
                self.remove_unassigned(node)
            self.insert_after(node, prev)
            prev = node

    def path(self, driver: DriverRef) -> list[Node]:
        """Nodes of a route from its start depot to its end depot."""
        driver = self._driver(driver)
        nodes: list[Node] = []
        node = self.problem.nodes[driver.start_node_id]
        while node is not None:
            nodes.append(node)
            node = self.next_nodes[node.id]
        return nodes

    def is_unassigned(self, node: Node) -> bool:
        return self._unassigned_index[node.id] != -1

    def used_driver_count(self) -> int:
        return sum(1 for d in self.problem.drivers if self.route_lengths[d.id] >= 1)

    def distance(self, a: Node, b: Node) -> float:
        return self.problem.distances[a.dist_id][b.dist_id]

    # -- costs -------------------------------------------------------------

    def cost(self) -> float:
        """Full cost; also remembered as ``last_cost``."""
        self.last_cost = self.cost_function.cost(self)
        return self.last_cost

    def route_cost(self, driver: DriverRef) -> float:
        return self.cost_function.route_cost(self, self._driver(driver))

    def update(self) -> None:
        self.cost_function.update(self)

    def update_route(self, driver: DriverRef) -> None:
        self.cost_function.update_route(self, self._driver(driver))

    def describe(self) -> str:
        lines = [
            f"Solution non-empty routes:{self.used_driver_count()} "
            f"routes:{len(self.problem.drivers)} cost:{self.cost_function.cost(self):.4f}"
        ]
        if self.show_output:
            for driver in self.problem.drivers:
                if self.route_lengths[driver.id] >= 1:
                    lines.append(self.cost_function.describe_route(self, driver))
            if self._unassigned:
                lines.append("Unassigneds:" + "".join(f"{n.no} " for n in self._unassigned))
        return "\n".join(lines)

    def copy(self) -> Solution:
        """Independent routes over the same problem and cost function."""
        clone = _copy.copy(self)
        clone.next_nodes = list(self.next_nodes)
        clone.prev_nodes = list(self.prev_nodes)
        clone.assigned_to = list(self.assigned_to)
        clone.route_lengths = list(self.route_lengths)
        clone._unassigned = list(self._unassigned)
        clone._unassigned_index = list(self._unassigned_index)
        return clone