# sbrp

A heuristic solver for the stochastic bike-sharing rebalancing problem.
Vehicles leave a depot, visit stations, and pick up or drop off bikes so that
station occupancy copes with a set of demand scenarios. Routes are built by
sequential insertion and then improved with adaptive large neighbourhood
search (ALNS), using random and relatedness-based removal together with
sequential and regret-k insertion. A route's cost is its travel distance plus
an expected recourse cost averaged over all scenarios; a route that cannot
serve every scenario is priced at a fixed penalty, as is every station left
unassigned.

The package uses only the standard library.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install .[test]
pytest
```

## Command line

The `sbrp` command takes `key=value` arguments (a space or `;` may also
separate key and value):

```
sbrp instance_file=instances/example.txt instance_type=dins epsilon=1 delta=0.5 iterations=5000
```

- `instance_file`: path of the instance to solve.
- `instance_type`: `dins` or `pcg`, the format of the instance file.
- `epsilon`: weight given to recourse; the recourse penalty per unit is
  `ceil(c_min * epsilon)`, where `c_min` is the smallest distance taken from
  the instance's distance matrix.
- `delta`: share of a station's capacity that may be moved there
  (it sets each station's pick-up and drop-off limits).
- `iterations`: number of ALNS iterations (at least 1).

Unknown keys and arguments without a value are ignored.

Running `sbrp` with no arguments prints a usage message and exits with
status 1. It also exits with status 1 when `iterations` is missing or below 1,
when `instance_type` is neither `dins` nor `pcg`, when no `instance_file` is
given, or when the file cannot be read (the `LoadError` message goes to
standard error).

On success the command prints the worst scenario and its lower bound, the
routes it found with their distance and recourse, any stations left
unassigned, the processor time taken, and the upper bound split into distance
and recourse with the number of vehicles used.

## Library use

```python
from sbrp.parameters import parse_parameters
from sbrp.loader import load_dins
from sbrp.lower_bound import set_worst_scenario, sort_from_worst_scenarios
from sbrp.solution import CostFunction, Solution
from sbrp.insertion import (
    InsertionMethod, SequentialInsertion, RegretInsertion, RegretInsertionOperator,
)
from sbrp.removal import RandomRemoval, RelatednessRemoval
from sbrp.alns import ALNS

parameters = parse_parameters(["instance_file=example.txt", "delta=0.5", "epsilon=1"])
problem = load_dins("example.txt", parameters)
set_worst_scenario(problem)
sort_from_worst_scenarios(problem)

solution = Solution(problem, CostFunction())
solution.unassign_all()

method = InsertionMethod(problem)
sequential = SequentialInsertion(method)
sequential.insert(solution)

regret = RegretInsertion(problem, method)
alns = ALNS(iterations=1000, temperature=0.99)
alns.add_insert_operator(sequential)
alns.add_insert_operator(RegretInsertionOperator(regret, 3))
alns.add_remove_operator(RandomRemoval())
alns.add_remove_operator(RelatednessRemoval(problem.distances))

best = alns.optimize(solution)
best.update()
print(best.describe())
```

`ALNS.optimize` returns the best solution it found; it needs at least one
insertion and one removal operator and raises `ValueError` otherwise. A
`BestSolutionList` from `sbrp.best_solutions` can be passed as its second
argument to keep copies of the best feasible solutions seen along the way,
sorted by cost, with solutions of equal cost kept only once.

`ALNS`, `RandomRemoval` and `RelatednessRemoval` each take an optional
`random.Random` instance, so a run can be made repeatable by seeding it.

Other pieces:

- `sbrp.route_feasibility`: `is_route_feasible`, `is_feasible_for_scenario`,
  `recourse_cost` and `scenario_recourse_cost` for a single route.
- `sbrp.lower_bound`: `scenario_lower_bound`, `driver_count` and the
  `RecourseLowerBound` class for bounds on recourse and fleet size.
- `sbrp.model`: `Node`, `Driver`, `Problem`, `Move` and `NodeType`.

## Instance formats

Both formats are whitespace-separated numbers.

- **dins**: number of stations; station capacities; initial occupancies;
  number of scenarios; scenario probabilities; the demand of each station in
  each scenario (one scenario after another); fleet size and vehicle capacity;
  the full distance matrix. `c_min` is the smallest positive distance.
- **pcg**: vehicle capacity; number of stations; capacities; occupancies;
  number of scenarios; demands per station over all scenarios; the full
  distance matrix. The fleet has one vehicle per station. A pcg instance
  whose smallest off-diagonal distance is below one unit is rejected with
  `LoadError`.

In both formats station 0 is the depot. A file that ends early or holds a
value that is not a number raises `LoadError`.

## What it does not do

- Scenario probabilities in dins files are read but not used: every scenario
  counts equally in the expected recourse.
- The search stops only after its iteration count; `ALNS.max_time` and
  `ALNS.chrono_check_iter` are kept as settings but no time limit is applied.
- Results are printed only; nothing is written to a file, and no initial
  solution can be read from one.