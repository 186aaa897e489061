from procsim.models.common import ParameterSet, ResultSet
from procsim.models.crystallization import iter_crystallizer, simulate_crystallization_basic
from procsim.models.distillation import (
    simulate_distillation_basic,
    simulate_distillation_extended,
)
from procsim.models.fermentation import (
    iter_states,
    simulate_fermentation_basic,
    simulate_fermentation_extended,
)
from procsim.models.filtration import (
    sample_capture,
    simulate_filtration_basic,
    simulate_filtration_extended,
)
from procsim.models.reactor import simulate_reactor_basic, simulate_reactor_extended

__all__ = [
    "ParameterSet",
    "ResultSet",
    "simulate_distillation_basic",
    "simulate_distillation_extended",
    "simulate_filtration_basic",
    "simulate_filtration_extended",
    "sample_capture",
    "simulate_fermentation_basic",
    "simulate_fermentation_extended",
    "iter_states",
    "simulate_reactor_basic",
    "simulate_reactor_extended",
    "simulate_crystallization_basic",
    "iter_crystallizer",
]
