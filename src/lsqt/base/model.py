"""Model construction: Hamiltonian, disorder fields and grids of one run.

Construction order: parameters, energy grid, (time-step grid), the lattice
expansion or general-model read, vacancy removal, then Anderson or
charged-impurity potential. Any failure raises a
:class:`~lsqt.errors.ModelBuildError` and leaves no partial model behind.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import logging

import numpy as np
import scipy.sparse as sp

from .. import REAL
from ..disorder.anderson import anderson_potential
from ..errors import ConfigurationError
from ..disorder.charged_impurity import Impurities, apply_charged_impurities
from ..disorder.vacancy import apply_vacancies
from ..geometry.unit_cell import UnitCell, expand_supercell, supercell_positions
from ..io.general import read_general_model
from ..io.grids import read_energies, read_time_steps
from ..io.lattice import read_lattice
from ..io.parameters import Parameters, read_parameters
from ..stochastic.random_state import initialize_state
from .neighbor_table import NeighborTable

PARAMETER_FILE = 'para.in'
ENERGY_FILE = 'energy.in'
TIME_STEP_FILE = 'time_step.in'
LATTICE_FILE = 'lattice.in'


def _check_spin_pairing(params: Parameters, n_atoms: int) -> None:
    """Spin states pair atoms as (2k, 2k+1), so the atom count must be even."""
    if params.calculate_spin and n_atoms % 2:
        raise ConfigurationError(f"calculate_spin needs an even number of atoms, got {n_atoms}")


@dataclass(slots=True)
class Model:
    """Everything the propagation engine consumes from model construction."""
    parameters: Parameters
    energies: np.ndarray
    table: NeighborTable
    potential: np.ndarray
    time_steps: np.ndarray | None = None
    positions: np.ndarray | None = None
    box: np.ndarray | None = None
    pbc: tuple | None = None
    transport_axis: int = 0
    vacancies: np.ndarray | None = None
    impurities: Impurities | None = None
    unit_cell: UnitCell | None = field(default=None, repr=False)

    @property
    def number_of_atoms(self) -> int:
        return self.table.number_of_atoms

    @classmethod
    def from_directory(cls, directory: str | Path, rng: np.random.Generator) -> "Model":
        """Build the model described by the input files in ``directory``."""
        directory = Path(directory)
        params = read_parameters(directory / PARAMETER_FILE)
        energies = read_energies(directory / ENERGY_FILE)
        time_steps = read_time_steps(directory / TIME_STEP_FILE) if params.requires_time else None
        if params.is_lattice:
            cell = read_lattice(directory / LATTICE_FILE)
            model = cls.from_unit_cell(cell, params, energies, rng, time_steps=time_steps)
        else:
            data = read_general_model(directory, need_positions=params.requires_time)
            _check_spin_pairing(params, data.table.number_of_atoms)
            model = cls(parameters=params, energies=energies, table=data.table,
                        potential=data.potential, time_steps=time_steps)
            if data.geometry is not None:
                model.positions = data.geometry.positions
                model.box = data.geometry.box
                model.pbc = data.geometry.pbc
                model.transport_axis = data.geometry.transport_axis
        model.log_summary()
        return model

    @classmethod
    def from_unit_cell(cls, cell: UnitCell, params: Parameters, energies: np.ndarray,
                       rng: np.random.Generator, time_steps: np.ndarray | None = None) -> "Model":
        """Expand ``cell`` and apply the disorder requested in ``params``."""
        params.validate()
        table = expand_supercell(cell)
        _check_spin_pairing(params, table.number_of_atoms)
        # Positions are only needed by the impurity potential.
        positions = supercell_positions(cell) if params.has_charged_impurity else None
        vacancies = None
        if params.has_vacancy_disorder:
            result = apply_vacancies(table, rng, params.vacancy_count, positions=positions)
            table, positions, vacancies = result.table, result.positions, result.vacancies

        potential = np.zeros(table.number_of_atoms, dtype=REAL)
        impurities = None
        if params.has_anderson_disorder:
            anderson_potential(rng, table.number_of_atoms, params.anderson_strength, out=potential)
        if params.has_charged_impurity:
            _, impurities = apply_charged_impurities(
                rng, positions, cell.box, cell.pbc, params.impurity_count,
                params.impurity_strength, params.impurity_range, out=potential)

        return cls(parameters=params, energies=energies, table=table, potential=potential,
                   time_steps=time_steps, positions=positions, box=cell.box, pbc=tuple(cell.pbc),
                   transport_axis=cell.transport_axis, vacancies=vacancies,
                   impurities=impurities, unit_cell=cell)

    def random_state(self, rng: np.random.Generator, state_real: np.ndarray | None = None,
                     state_imag: np.ndarray | None = None) -> tuple[np.ndarray, np.ndarray]:
        """Random initial state for one stochastic sample, in the given buffers if any."""
        n = self.number_of_atoms
        if state_real is None:
            state_real = np.empty(n, dtype=REAL)
        if state_imag is None:
            state_imag = np.empty(n, dtype=REAL)
        initialize_state(rng, state_real, state_imag, spin=self.parameters.calculate_spin)
        return state_real, state_imag

    def hamiltonian(self) -> sp.csr_array:
        return self.table.hamiltonian(self.potential)

    def velocity(self) -> sp.csr_array:
        return self.table.velocity()

    def log_summary(self) -> None:
        logging.info("---------------------------------")
        logging.info("Number of atoms        = {}".format(self.number_of_atoms))
        logging.info("Max neighbors per atom = {}".format(self.table.max_neighbor))
        logging.info("Number of hops         = {}".format(self.table.number_of_pairs))
        logging.info("Number of energies     = {}".format(self.energies.size))
        if self.time_steps is not None:
            logging.info("Number of time steps   = {}".format(self.time_steps.size))
        if self.vacancies is not None:
            logging.info("Vacancies              = {}".format(self.vacancies.size))
        if self.impurities is not None:
            logging.info("Charged impurities     = {}".format(self.impurities.count))
        logging.info("---------------------------------")
