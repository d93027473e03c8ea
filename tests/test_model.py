import pytest

from sbrp.model import INFINITE, Driver, Move, Node, NodeType, Problem


def test_update_w_full_delta_splits_capacity():
    node = Node(station_capacity=10, occupancy=3)
    node.update_w(1.0)
    assert node.w_minus == 3
    assert node.w_plus + node.w_minus == 10


def test_update_w_zero_delta_gives_no_room():
    node = Node(station_capacity=10, occupancy=3)
    node.update_w(0.0)
    assert (node.w_plus, node.w_minus) == (0, 0)


def test_update_w_rounds_up():
    node = Node(station_capacity=10, occupancy=5)
    node.update_w(0.05)
    assert (node.w_plus, node.w_minus) == (1, 1)


@pytest.mark.parametrize("delta", [0.1, 0.3, 0.5, 0.8])
@pytest.mark.parametrize("occupancy", [0, 4, 9])
def test_update_w_stays_within_station(delta, occupancy):
    node = Node(station_capacity=9, occupancy=occupancy)
    node.update_w(delta)
    assert 0 <= node.w_minus <= occupancy
    assert 0 <= node.w_plus <= 9 - occupancy


@pytest.mark.parametrize(
    "kind, expected",
    [
        (NodeType.CUSTOMER, True),
        (NodeType.PICKUP, True),
        (NodeType.DROP, True),
        (NodeType.START_DEPOT, False),
        (NodeType.END_DEPOT, False),
        (NodeType.UNDEFINED, False),
    ],
)
def test_is_customer(kind, expected):
    assert Node(kind=kind).is_customer() is expected


def test_describe_customer_lists_demands():
    node = Node(id=2, kind=NodeType.CUSTOMER, demands=[4, -2])
    text = node.describe()
    assert text.startswith("Node:2 type:Cust")
    assert text.endswith("demands:2 dmd:4 -2 ")


def test_describe_customer_for_scenario():
    node = Node(id=2, kind=NodeType.CUSTOMER, demands=[4, -2])
    assert node.describe(1).endswith("e:1 dmd:-2 ")


def test_describe_depots_and_undefined():
    assert Node(id=7, kind=NodeType.START_DEPOT).describe() == "Node:7 type:stadepot"
    assert Node(id=8, kind=NodeType.END_DEPOT).describe() == "Node:8 type:enddepot"
    assert Node(id=9).describe() == ""


def test_problem_customers_follow_added_ids():
    problem = Problem()
    first = Node(id=0, kind=NodeType.CUSTOMER)
    second = Node(id=1, kind=NodeType.CUSTOMER)
    depot = Node(id=2, kind=NodeType.START_DEPOT)
    for node in (first, second, depot):
        problem.add_node(node)
    problem.add_customer(second)
    problem.add_customer(first)
    assert problem.customers == [second, first]
    assert problem.customers[0] is second


def test_problem_distance_uses_dist_id():
    problem = Problem(distances=[[0.0, 2.5], [4.0, 0.0]])
    a = Node(id=5, dist_id=0)
    b = Node(id=6, dist_id=1)
    assert problem.distance(a, b) == 2.5
    assert problem.distance(b, a) == 4.0
    assert problem.dimension == 2


def test_problem_scenarios_and_drivers():
    problem = Problem()
    for s in range(3):
        problem.add_scenario(s)
    problem.add_sorted_scenario(2)
    driver = Driver(id=0, capacity=5)
    problem.add_driver(driver)
    assert problem.scenarios == [0, 1, 2]
    assert problem.sorted_scenarios == [2]
    assert problem.drivers[0] is driver


def test_describe_nodes_skips_untyped_nodes():
    problem = Problem()
    problem.add_node(Node(id=0, kind=NodeType.CUSTOMER, demands=[1]))
    problem.add_node(Node(id=1))
    problem.add_node(Node(id=2, kind=NodeType.END_DEPOT))
    lines = problem.describe_nodes().split("\n")
    assert len(lines) == 2
    assert lines[1] == "Node:2 type:enddepot"


def test_move_defaults_and_ordering():
    default = Move()
    assert default.delta_cost == INFINITE
    assert default.is_feasible is False
    moves = [Move(delta_cost=c) for c in (3.0, 1.0, 2.0)]
    assert [m.delta_cost for m in sorted(moves)] == [1.0, 2.0, 3.0]