"""Command line entry point: load an instance, build a solution, improve it with ALNS."""

from __future__ import annotations

import sys
import time
from typing import Sequence

from .alns import ALNS
from .insertion import InsertionMethod, RegretInsertion, RegretInsertionOperator, SequentialInsertion
from .loader import LoadError, load_dins, load_pcg
from .lower_bound import set_worst_scenario, sort_from_worst_scenarios
from .parameters import parse_parameters
from .removal import RandomRemoval, RelatednessRemoval
from .solution import CostFunction, Solution

USAGE = (
    "usage: executable, instance_file, epsilon, delta, cuts_type, instance_type, "
    "algorithm optional:initial_solution_file \n"
    "Instance_type: dins or pcg\n"
    "Cuts: P&L=1 Benders=2 Hybrid=3\n"
    "Algorithm: DL-shaped=dl Multicut=m(Only accepts Benders Opt Cuts=6)\n"
    "exiting."
)

_LOADERS = {"dins": load_dins, "pcg": load_pcg}


def main(argv: Sequence[str] | None = None) -> int:
    """Run the heuristic on ``key=value`` arguments; return the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print(USAGE)
        return 1

    print("Reading parameters")
    params = parse_parameters(args)

    if params.iterations < 1:
        print("Need more than 1 iterarion. Exiting ...")
        return 1

    loader = _LOADERS.get(params.instance_type or "")
    if loader is None:
        print("Wrong file type. Exiting ... ")
        return 1
    if params.instance_file is None:
        print("Error in the input filename: (none)", file=sys.stderr)
        return 1

    try:
        problem = loader(params.instance_file, params)
    except LoadError as exc:
        print(exc, file=sys.stderr)
        return 1

    worst, worst_cost = set_worst_scenario(problem)
    print(f"worst_scenario:{worst} cost:{worst_cost:.1f}")
    sort_from_worst_scenarios(problem)

    cost_function = CostFunction()
    solution = Solution(problem, cost_function)
    solution.unassign_all()

    method = InsertionMethod(problem)
    sequential = SequentialInsertion(method)
    regret = RegretInsertion(problem, method)
    regret_3 = RegretInsertionOperator(regret, 3)
    regret_k = RegretInsertionOperator(regret, len(problem.drivers))
    random_removal = RandomRemoval()
    related_removal = RelatednessRemoval(problem.distances)

    sequential.insert(solution)

    alns = ALNS()
    alns.add_insert_operator(sequential)
    alns.add_insert_operator(regret_3)
    alns.add_insert_operator(regret_k)
    alns.add_remove_operator(random_removal)
    alns.add_remove_operator(related_removal)

    sequential.insert(solution)

    alns.temperature_iter_init = 0
    alns.temperature = 0.99
    alns.iterations = params.iterations

    start = time.process_time()
    solution = alns.optimize(solution)
    elapsed = time.process_time() - start

    solution.update()
    print(solution.describe())

    distance = solution.total_distances
    recourse = solution.total_recourse
    upper_bound = distance + recourse
    used = solution.used_driver_count()
    print(f"time:{elapsed:.2f}")
    print(f"UB Heur:{upper_bound:.3f} dist:{distance:.3f} rec:{recourse:.3f} drv:{used}")
    return 0


if __name__ == "__main__":
    sys.exit(main())