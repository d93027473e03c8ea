import pytest

from sbrp.parameters import Parameters, parse_parameters


def test_defaults_mark_unset_values():
    params = Parameters()
    assert params.iterations == -1
    assert params.worst_scenario == -1
    assert params.instance_file is None


def test_parse_all_known_keys():
    params = parse_parameters(
        [
            "prog",
            "instance_file=data/inst.txt",
            "epsilon=0.5",
            "delta=0.3",
            "instance_type=dins",
            "iterations=100",
        ]
    )
    assert params.instance_file == "data/inst.txt"
    assert params.epsilon == 0.5
    assert params.delta == 0.3
    assert params.instance_type == "dins"
    assert params.iterations == 100


@pytest.mark.parametrize("arg", ["epsilon;0.25", "epsilon 0.25", "epsilon==0.25"])
def test_alternative_delimiters(arg):
    assert parse_parameters([arg]).epsilon == 0.25


def test_argument_without_value_is_ignored():
    params = parse_parameters(["epsilon", "iterations="])
    assert params.epsilon == 0.0
    assert params.iterations == -1


def test_non_numeric_value_keeps_default():
    assert parse_parameters(["iterations=abc"]).iterations == -1


def test_numeric_prefix_is_read():
    assert parse_parameters(["iterations=12x"]).iterations == 12


def test_unknown_key_is_ignored():
    assert parse_parameters(["colour=blue"]) == Parameters()


def test_cmin_epsilon_rounds_up():
    assert Parameters(cmin=10.0, epsilon=0.25).cmin_epsilon() == 3.0


@pytest.mark.parametrize(
    "cmin, epsilon", [(1.0, 1.0), (7.5, 0.3), (12.0, 0.01), (3.0, 2.0)]
)
def test_cmin_epsilon_is_smallest_integer_not_below_product(cmin, epsilon):
    value = Parameters(cmin=cmin, epsilon=epsilon).cmin_epsilon()
    assert value == int(value)
    assert 0 <= value - cmin * epsilon < 1