"""Core data of a bike-repositioning instance: nodes, drivers, problem, moves."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field

from .parameters import Parameters

EPSILON = 10e-5
INF = 99999999
INFINITE = 99999999.9
INF_ROUTE_COST = 1000000
UNASSIGNED_COST = 1000000


class NodeType(enum.IntEnum):
    UNDEFINED = 0x00
    CUSTOMER = 0x01
    START_DEPOT = 0x02
    PICKUP = 0x03
    END_DEPOT = 0x04
    DROP = 0x05


@dataclass(eq=False)
class Node:
    """A station or a depot copy."""

    id: int = -1
    origin_id: int = -1
    station_capacity: int = 0
    occupancy: int = 0
    dist_id: int = -1
    no: int = 0
    kind: NodeType = NodeType.UNDEFINED
    demands: list[int] = field(default_factory=list)
    w_plus: int = 0
    w_minus: int = 0
    is_not_in_cycle: bool = True
    arc_index: int = -1

    def update_w(self, delta: float) -> None:
        """Set the room for pickups and drops allowed by the fraction ``delta``."""
        cap = math.ceil(delta * self.station_capacity)
        self.w_minus = min(cap, self.occupancy)
        self.w_plus = min(cap, self.station_capacity - self.occupancy)

    def is_customer(self) -> bool:
        return (self.kind & NodeType.CUSTOMER) == NodeType.CUSTOMER

    def describe(self, scenario: int | None = None) -> str:
        """One-line description; empty for node kinds without one."""
        if self.kind == NodeType.CUSTOMER:
            head = (
                f"Node:{self.id} type:Cust cap:{self.station_capacity} "
                f"occ:{self.occupancy} wp:{self.w_plus} wm:{self.w_minus} "
            )
            if scenario is None:
                values = "".join(f"{d} " for d in self.demands)
                return f"{head}demands:{len(self.demands)} dmd:{values}"
            return f"{head}e:{scenario} dmd:{self.demands[scenario]} "
        if self.kind == NodeType.START_DEPOT:
            return f"Node:{self.id} type:stadepot"
        if self.kind == NodeType.END_DEPOT:
            return f"Node:{self.id} type:enddepot"
        return ""


@dataclass(eq=False)
class Driver:
    """A vehicle with its own start and end depot nodes."""

    id: int = 0
    start_node_id: int = -1
    end_node_id: int = -1
    capacity: int = 0
    sum_demand: int = 0
    cur_distance: float = 0.0
    cur_recourse: float = 0.0
    is_feasible: bool = False


@dataclass(eq=False)
class Problem:
    """Nodes, drivers, scenarios and distances of one instance."""

    nodes: list[Node] = field(default_factory=list)
    drivers: list[Driver] = field(default_factory=list)
    scenarios: list[int] = field(default_factory=list)
    sorted_scenarios: list[int] = field(default_factory=list)
    distances: list[list[float]] = field(default_factory=list)
    customer_ids: list[int] = field(default_factory=list)
    driver_count_lb: int = 1
    upper_bound: float = 9999999999.9
    parameters: Parameters = field(default_factory=Parameters)

    @property
    def customers(self) -> list[Node]:
        return [self.nodes[i] for i in self.customer_ids]

    @property
    def dimension(self) -> int:
        return len(self.distances)

    def add_node(self, node: Node) -> None:
        self.nodes.append(node)

    def add_customer(self, node: Node) -> None:
        self.customer_ids.append(node.id)

    def add_driver(self, driver: Driver) -> None:
        self.drivers.append(driver)

    def add_scenario(self, scenario: int) -> None:
        self.scenarios.append(scenario)

    def add_sorted_scenario(self, scenario: int) -> None:
        self.sorted_scenarios.append(scenario)

    def distance(self, a: Node, b: Node) -> float:
        return self.distances[a.dist_id][b.dist_id]

    def describe_nodes(self, scenario: int | None = None) -> str:
        lines = (node.describe(scenario) for node in self.nodes)
        return "\n".join(line for line in lines if line)


@dataclass(eq=False)
class Move:
    """A candidate insertion of ``node`` after ``prev`` in the route of ``to``."""

    node: Node | None = None
    to: Driver | None = None
    source: Driver | None = None
    delta_cost: float = INFINITE
    delta_distance: float = 0.0
    is_feasible: bool = False
    prev: Node | None = None

    def __lt__(self, other: Move) -> bool:
        return self.delta_cost < other.delta_cost