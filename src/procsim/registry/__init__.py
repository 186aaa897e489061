from procsim.registry.processes import (
    DEFAULT_VERSIONS,
    STOCHASTIC_PROCESSES,
    ModelVariant,
    ProcessKind,
    default_version,
    get_model,
    get_schema,
    list_processes,
    model_versions,
    resolve_kind,
)
from procsim.registry.schema import ParameterSchema, ParameterSpec

__all__ = [
    "ProcessKind",
    "ParameterSpec",
    "ParameterSchema",
    "ModelVariant",
    "DEFAULT_VERSIONS",
    "STOCHASTIC_PROCESSES",
    "resolve_kind",
    "list_processes",
    "get_schema",
    "get_model",
    "model_versions",
    "default_version",
]
