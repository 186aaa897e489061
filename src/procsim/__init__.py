"""procsim public API: unit-operation models, their schemas, and the dispatching simulator."""

from procsim.engine import (
    Trajectory,
    build_visual_frame,
    simulate,
    simulate_clamped,
    simulate_over_time,
)
from procsim.errors import (
    InvalidParameterError,
    ProcessSimulationError,
    UnknownProcessError,
    UnknownVariantError,
)
from procsim.registry import (
    ParameterSchema,
    ParameterSpec,
    ProcessKind,
    get_model,
    get_schema,
    list_processes,
    model_versions,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ProcessKind",
    "ParameterSpec",
    "ParameterSchema",
    "get_schema",
    "get_model",
    "list_processes",
    "model_versions",
    "simulate",
    "simulate_clamped",
    "simulate_over_time",
    "build_visual_frame",
    "Trajectory",
    "ProcessSimulationError",
    "UnknownProcessError",
    "UnknownVariantError",
    "InvalidParameterError",
]
