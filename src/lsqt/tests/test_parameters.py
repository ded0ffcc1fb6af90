import sys
from pathlib import Path

import pytest

SRC_DIR = Path(__file__).resolve().parents[2]
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from lsqt.errors import ConfigurationError, InputFileError
from lsqt.io.parameters import (
    GENERAL_MODEL,
    LATTICE_MODEL,
    VALID_KEYS,
    parse_parameter_lines,
    read_parameters,
)


def test_defaults_for_empty_file():
    params = parse_parameter_lines([])
    assert params.model == GENERAL_MODEL
    assert params.number_of_random_vectors == 1
    assert params.number_of_moments == 1000
    assert params.energy_max == pytest.approx(10.0)
    assert not params.has_anderson_disorder
    assert not params.has_charged_impurity
    assert not params.has_vacancy_disorder
    assert not params.requires_time


def test_all_keys_parsed():
    lines = [
        "model 1",
        "",
        "charged_impurity 10 2.5 1.5",
        "vacancy_disorder 3",
        "calculate_msd",
        "calculate_spin",
        "number_of_random_vectors 4",
        "number_of_moments 256",
        "energy_max 6.5",
        "   ",
    ]
    params = parse_parameter_lines(lines)
    assert params.is_lattice
    assert params.impurity_count == 10
    assert params.impurity_strength == pytest.approx(2.5)
    assert params.impurity_range == pytest.approx(1.5)
    assert params.vacancy_count == 3
    assert params.calculate_msd and params.calculate_spin and not params.calculate_vac
    assert params.requires_time
    assert params.number_of_random_vectors == 4
    assert params.number_of_moments == 256
    assert params.energy_max == pytest.approx(6.5)


def test_unknown_key_lists_valid_keys():
    with pytest.raises(ConfigurationError) as info:
        parse_parameter_lines(["model 1", "frobnicate 5", "this line is never reached"])
    message = str(info.value)
    assert "frobnicate" in message
    for key in VALID_KEYS:
        assert key in message


def test_unknown_key_stops_before_later_lines():
    # The broken model value on line 3 would raise a different message.
    with pytest.raises(ConfigurationError, match="frobnicate"):
        parse_parameter_lines(["frobnicate 5", "model 7"])


@pytest.mark.parametrize("line", [
    "model 2",
    "model lattice",
    "anderson_disorder 0",
    "anderson_disorder -1.0",
    "charged_impurity 0 1.0 1.0",
    "charged_impurity 3 1.0",
    "vacancy_disorder -2",
    "vacancy_disorder 1.5",
    "number_of_moments 0",
    "number_of_random_vectors",
    "energy_max abc",
    "calculate_vac 1",
])
def test_invalid_values_rejected(line):
    with pytest.raises(ConfigurationError):
        parse_parameter_lines([f"model {LATTICE_MODEL}", line])


@pytest.mark.parametrize("lines", [
    ["calculate_spin", "calculate_vac"],
    ["model 1", "calculate_spin", "vacancy_disorder 3"],
    ["model 1", "anderson_disorder 1.0", "charged_impurity 2 1.0 1.0"],
    ["model 0", "anderson_disorder 1.0"],
    ["model 0", "charged_impurity 2 1.0 1.0"],
    ["model 0", "vacancy_disorder 2"],
])
def test_disallowed_combinations(lines):
    with pytest.raises(ConfigurationError):
        parse_parameter_lines(lines)


def test_configuration_error_is_value_error():
    with pytest.raises(ValueError):
        parse_parameter_lines(["model 9"])


def test_read_parameters_from_file(tmp_path):
    path = tmp_path / "para.in"
    path.write_text("model 1\nanderson_disorder 2.0\ncalculate_vac\n")
    params = read_parameters(path)
    assert params.is_lattice
    assert params.anderson_strength == pytest.approx(2.0)
    assert params.calculate_vac


def test_missing_file_names_path(tmp_path):
    path = tmp_path / "missing" / "para.in"
    with pytest.raises(InputFileError) as info:
        read_parameters(path)
    assert str(path) in str(info.value)
