import pytest

from sbrp.insertion import (
    InsertionMethod,
    InsertOperator,
    RegretInsertion,
    RegretInsertionOperator,
    SequentialInsertion,
)
from sbrp.model import INFINITE, Driver, Node, NodeType, Problem
from sbrp.parameters import Parameters
from sbrp.solution import Solution


def make_problem(demands, capacity=10, drivers=1, delta=1.0):
    params = Parameters(delta=delta, epsilon=1.0, cmin=1.0, worst_scenario=0)
    problem = Problem(parameters=params)
    stations = len(demands) + 1
    for i, dmds in enumerate(demands):
        node = Node(
            id=i, no=i + 1, dist_id=i + 1, kind=NodeType.CUSTOMER,
            occupancy=5, station_capacity=10, demands=list(dmds),
        )
        node.update_w(delta)
        problem.add_node(node)
    for e in range(len(demands[0])):
        problem.add_scenario(e)
    for d in range(drivers):
        start = Node(id=stations - 1 + 2 * d, dist_id=0, kind=NodeType.START_DEPOT)
        end = Node(id=stations + 2 * d, dist_id=0, kind=NodeType.END_DEPOT)
        problem.add_node(start)
        problem.add_node(end)
        problem.add_driver(Driver(id=d, start_node_id=start.id, end_node_id=end.id, capacity=capacity))
    for node in problem.nodes[: stations - 1]:
        problem.add_customer(node)
    problem.distances = [[float(abs(i - j)) for j in range(stations)] for i in range(stations)]
    return problem


def fresh_solution(problem):
    solution = Solution(problem)
    solution.unassign_all()
    return solution


def routed_ids(solution):
    return sorted(
        n.id for d in solution.drivers for n in solution.path(d) if n.kind == NodeType.CUSTOMER
    )


def test_insert_cost_on_empty_route():
    problem = make_problem([[1, -1], [2, 0]])
    solution = fresh_solution(problem)
    method = InsertionMethod(problem)
    node = problem.nodes[0]
    move = method.insert_cost(solution, node, problem.drivers[0])
    assert move.is_feasible
    assert move.delta_distance == 2.0
    assert move.prev is problem.nodes[problem.drivers[0].start_node_id]
    assert move.to is problem.drivers[0]
    assert move.delta_cost >= move.delta_distance


def test_insert_cost_rejects_node_needing_two_vehicles():
    problem = make_problem([[50], [1]], capacity=10, delta=0.0)
    solution = fresh_solution(problem)
    move = InsertionMethod(problem).insert_cost(solution, problem.nodes[0], problem.drivers[0])
    assert not move.is_feasible
    assert move.delta_cost == INFINITE


def test_insertion_list_is_snapshot():
    problem = make_problem([[1], [2]])
    solution = fresh_solution(problem)
    items = InsertionMethod(problem).insertion_list(solution)
    assert items == solution.unassigned
    items.clear()
    assert solution.unassigned_count == 2


def test_apply_insert_move_puts_node_on_route():
    problem = make_problem([[1], [2]])
    solution = fresh_solution(problem)
    method = InsertionMethod(problem)
    node = problem.nodes[1]
    move = method.insert_cost(solution, node, problem.drivers[0])
    method.apply_insert_move(solution, move)
    assert not solution.is_unassigned(node)
    assert solution.assigned_to[node.id] is problem.drivers[0]
    assert node in solution.path(0)
    assert solution.route_lengths[0] == 1


def test_sequential_inserts_everything():
    problem = make_problem([[1, -1], [-2, 1], [3, 0], [0, -2]], drivers=2)
    solution = fresh_solution(problem)
    SequentialInsertion(InsertionMethod(problem)).insert(solution)
    assert solution.unassigned_count == 0
    assert routed_ids(solution) == [0, 1, 2, 3]


def test_sequential_keeps_infeasible_unassigned():
    problem = make_problem([[50], [1], [-1]], capacity=10, delta=0.0)
    solution = fresh_solution(problem)
    SequentialInsertion(InsertionMethod(problem)).insert(solution)
    assert solution.unassigned == [problem.nodes[0]]
    assert routed_ids(solution) == [1, 2]


@pytest.mark.parametrize("k", [1, 2, 3])
def test_regret_operator_inserts_everything(k):
    problem = make_problem([[1, -1], [-2, 1], [3, 0], [0, -2], [1, 1]], drivers=2)
    solution = fresh_solution(problem)
    regret = RegretInsertion(problem, InsertionMethod(problem))
    RegretInsertionOperator(regret, k).insert(solution)
    assert solution.unassigned_count == 0
    assert routed_ids(solution) == [0, 1, 2, 3, 4]
    assert sum(solution.route_lengths) == 5


def test_regret_keeps_infeasible_unassigned():
    problem = make_problem([[50], [1]], capacity=10, delta=0.0)
    solution = fresh_solution(problem)
    RegretInsertion(problem, InsertionMethod(problem)).insert(solution, 2)
    assert solution.unassigned == [problem.nodes[0]]
    assert routed_ids(solution) == [1]


def test_regret_cost_equal_routes():
    problem = make_problem([[1]], drivers=2)
    solution = fresh_solution(problem)
    regret = RegretInsertion(problem, InsertionMethod(problem))
    regret.insert(solution, 2)
    value, move = regret.regret_cost(solution, problem.nodes[0])
    assert value == 0.0
    assert move.is_feasible
    assert move.node is problem.nodes[0]


def test_regret_rejects_bad_k():
    problem = make_problem([[1]])
    regret = RegretInsertion(problem, InsertionMethod(problem))
    with pytest.raises(ValueError):
        regret.insert(fresh_solution(problem), 0)


def test_insert_operator_is_abstract():
    with pytest.raises(TypeError):
        InsertOperator()