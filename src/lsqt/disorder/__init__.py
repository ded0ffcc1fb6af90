from .sampling import permutation, sample_without_replacement
from .vacancy import VacancyResult, compact_indices, remove_atoms, apply_vacancies
from .anderson import anderson_potential
from .charged_impurity import Impurities, place_impurities, charged_impurity_potential, apply_charged_impurities
from ..geometry.periodic import minimum_image

__all__ = [
    "permutation",
    "sample_without_replacement",
    "VacancyResult",
    "compact_indices",
    "remove_atoms",
    "apply_vacancies",
    "anderson_potential",
    "Impurities",
    "place_impurities",
    "charged_impurity_potential",
    "apply_charged_impurities",
    "minimum_image",
]
