"""Run parameters read from ``para.in``.

Each non-blank line is ``key value...``. Keys are parsed strictly: a key
outside :data:`VALID_KEYS`, a wrong number of arguments or a token that does
not parse stops the parse immediately with a :class:`ConfigurationError`.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import logging
from typing import Iterable

from ..errors import ConfigurationError
from .tokens import read_text

GENERAL_MODEL = 0
LATTICE_MODEL = 1

VALID_KEYS = (
    'model',
    'anderson_disorder',
    'charged_impurity',
    'vacancy_disorder',
    'calculate_vac',
    'calculate_msd',
    'calculate_spin',
    'number_of_random_vectors',
    'number_of_moments',
    'energy_max',
)


@dataclass(slots=True)
class Parameters:
    """Validated scalar configuration of one run."""

    model: int = GENERAL_MODEL
    anderson_strength: float | None = None
    impurity_count: int = 0
    impurity_strength: float = 0.0
    impurity_range: float = 0.0
    vacancy_count: int = 0
    calculate_vac: bool = False
    calculate_msd: bool = False
    calculate_spin: bool = False
    number_of_random_vectors: int = 1
    number_of_moments: int = 1000
    energy_max: float = 10.0

    @property
    def is_lattice(self) -> bool:
        return self.model == LATTICE_MODEL

    @property
    def has_anderson_disorder(self) -> bool:
        return self.anderson_strength is not None

    @property
    def has_charged_impurity(self) -> bool:
        return self.impurity_count > 0

    @property
    def has_vacancy_disorder(self) -> bool:
        return self.vacancy_count > 0

    @property
    def requires_time(self) -> bool:
        """VAC and MSD need the time-step grid and hop displacements."""
        return self.calculate_vac or self.calculate_msd

    def validate(self) -> None:
        """Reject feature combinations that cannot be built together."""
        if self.model not in (GENERAL_MODEL, LATTICE_MODEL):
            raise ConfigurationError(
                f"model must be {GENERAL_MODEL} (general) or {LATTICE_MODEL} (lattice), got {self.model}"
            )
        if self.calculate_spin and self.calculate_vac:
            raise ConfigurationError("calculate_spin cannot be combined with calculate_vac")
        if self.calculate_spin and self.has_vacancy_disorder:
            # Compaction shifts indices and breaks the (2k, 2k+1) spin pairing.
            raise ConfigurationError("calculate_spin cannot be combined with vacancy_disorder")
        if self.has_anderson_disorder and self.has_charged_impurity:
            raise ConfigurationError(
                "anderson_disorder and charged_impurity are mutually exclusive"
            )
        if not self.is_lattice:
            for flag, key in ((self.has_anderson_disorder, 'anderson_disorder'),
                              (self.has_charged_impurity, 'charged_impurity'),
                              (self.has_vacancy_disorder, 'vacancy_disorder')):
                if flag:
                    raise ConfigurationError(f"{key} requires the lattice model (model {LATTICE_MODEL})")


def _positive_int(token: str, key: str, source: str) -> int:
    try:
        value = int(token)
    except ValueError as exc:
        raise ConfigurationError(f"{source}: {key} expects an integer, got {token!r}") from exc
    if value <= 0:
        raise ConfigurationError(f"{source}: {key} must be positive, got {value}")
    return value


def _positive_float(token: str, key: str, source: str) -> float:
    try:
        value = float(token)
    except ValueError as exc:
        raise ConfigurationError(f"{source}: {key} expects a real number, got {token!r}") from exc
    if not value > 0.0:
        raise ConfigurationError(f"{source}: {key} must be positive, got {value}")
    return value


_ARITY = {
    'model': 1,
    'anderson_disorder': 1,
    'charged_impurity': 3,
    'vacancy_disorder': 1,
    'calculate_vac': 0,
    'calculate_msd': 0,
    'calculate_spin': 0,
    'number_of_random_vectors': 1,
    'number_of_moments': 1,
    'energy_max': 1,
}


def parse_parameter_lines(lines: Iterable[str], source: str = '<para.in>') -> Parameters:
    """Parse parameter lines into a validated :class:`Parameters`."""
    params = Parameters()
    for line_number, line in enumerate(lines, start=1):
        tokens = line.split()
        if not tokens:
            continue
        key, args = tokens[0], tokens[1:]
        if key not in _ARITY:
            raise ConfigurationError(
                "{}:{}: unknown parameter {!r}; valid keys are: {}".format(
                    source, line_number, key, ', '.join(VALID_KEYS))
            )
        if len(args) != _ARITY[key]:
            raise ConfigurationError(
                f"{source}:{line_number}: {key} takes {_ARITY[key]} argument(s), got {len(args)}"
            )
        where = f"{source}:{line_number}"
        if key == 'model':
            try:
                params.model = int(args[0])
            except ValueError as exc:
                raise ConfigurationError(f"{where}: model expects 0 or 1, got {args[0]!r}") from exc
            if params.model not in (GENERAL_MODEL, LATTICE_MODEL):
                raise ConfigurationError(f"{where}: model expects 0 or 1, got {params.model}")
        elif key == 'anderson_disorder':
            params.anderson_strength = _positive_float(args[0], key, where)
        elif key == 'charged_impurity':
            params.impurity_count = _positive_int(args[0], key, where)
            params.impurity_strength = _positive_float(args[1], key, where)
            params.impurity_range = _positive_float(args[2], key, where)
        elif key == 'vacancy_disorder':
            params.vacancy_count = _positive_int(args[0], key, where)
        elif key == 'calculate_vac':
            params.calculate_vac = True
        elif key == 'calculate_msd':
            params.calculate_msd = True
        elif key == 'calculate_spin':
            params.calculate_spin = True
        elif key == 'number_of_random_vectors':
            params.number_of_random_vectors = _positive_int(args[0], key, where)
        elif key == 'number_of_moments':
            params.number_of_moments = _positive_int(args[0], key, where)
        elif key == 'energy_max':
            params.energy_max = _positive_float(args[0], key, where)
    params.validate()
    return params


def read_parameters(path: str | Path) -> Parameters:
    """Read and validate a parameter file."""
    text = read_text(path)
    params = parse_parameter_lines(text.splitlines(), source=str(path))
    logging.info("Parameters from {}: {}".format(path, params))
    return params
