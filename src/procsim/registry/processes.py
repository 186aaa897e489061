from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType

from procsim.errors import UnknownProcessError, UnknownVariantError
from procsim.models import (
    simulate_crystallization_basic,
    simulate_distillation_basic,
    simulate_distillation_extended,
    simulate_fermentation_basic,
    simulate_fermentation_extended,
    simulate_filtration_basic,
    simulate_filtration_extended,
    simulate_reactor_basic,
    simulate_reactor_extended,
)
from procsim.models.common import ParameterSet, ResultSet
from procsim.models.distillation import (
    DEFAULT_FEED_COMPOSITION,
    DEFAULT_FEED_TEMPERATURE_C,
    DEFAULT_PRESSURE_PA,
)
from procsim.registry.schema import ParameterSchema, ParameterSpec

ModelFunction = Callable[[ParameterSet], ResultSet]


class ProcessKind(StrEnum):
    DISTILLATION = "distillation"
    FILTRATION = "filtration"
    FERMENTATION = "fermentation"
    REACTOR_DESIGN = "reactorDesign"
    CRYSTALLIZATION = "crystallization"


@dataclass(frozen=True)
class ModelVariant:
    kind: ProcessKind
    version: str
    function: ModelFunction
    description: str = ""

    def __call__(self, parameters: ParameterSet) -> ResultSet:
        return self.function(parameters)


_SCHEMAS: dict[ProcessKind, ParameterSchema] = {
    ProcessKind.DISTILLATION: ParameterSchema(
        kind=ProcessKind.DISTILLATION,
        parameters=(
            ParameterSpec("feedRate", 0.0, 200.0, 1.0, 100.0, "kmol/h"),
            ParameterSpec("refluxRatio", 0.0, 10.0, 0.1, 3.0),
            ParameterSpec("numberOfPlates", 1.0, 50.0, 1.0, 20.0),
            ParameterSpec(
                "feedComposition", 0.0, 1.0, 0.01, DEFAULT_FEED_COMPOSITION, "mol frac", False
            ),
            ParameterSpec(
                "pressure", 50_000.0, 500_000.0, 1000.0, DEFAULT_PRESSURE_PA, "Pa", False
            ),
            ParameterSpec(
                "feedTemperature", 20.0, 150.0, 1.0, DEFAULT_FEED_TEMPERATURE_C, "degC", False
            ),
        ),
    ),
    ProcessKind.FILTRATION: ParameterSchema(
        kind=ProcessKind.FILTRATION,
        parameters=(
            ParameterSpec("particleSize", 0.01, 1.0, 0.01, 0.1, "mm"),
            ParameterSpec("fluidViscosity", 0.1, 10.0, 0.1, 1.0, "cP"),
            ParameterSpec("filterArea", 1.0, 50.0, 1.0, 10.0, "m2"),
        ),
    ),
    ProcessKind.FERMENTATION: ParameterSchema(
        kind=ProcessKind.FERMENTATION,
        parameters=(
            ParameterSpec("temperature", 20.0, 40.0, 0.1, 30.0, "degC"),
            ParameterSpec("pH", 3.0, 9.0, 0.1, 6.5),
            ParameterSpec("sugarConcentration", 5.0, 30.0, 0.1, 15.0, "g/L"),
            ParameterSpec("time", 24.0, 120.0, 1.0, 48.0, "h"),
        ),
    ),
    ProcessKind.REACTOR_DESIGN: ParameterSchema(
        kind=ProcessKind.REACTOR_DESIGN,
        parameters=(
            ParameterSpec("reactorVolume", 100.0, 5000.0, 100.0, 1000.0, "L"),
            ParameterSpec("flowRate", 1.0, 50.0, 1.0, 10.0, "L/s"),
            ParameterSpec("reactionRate", 0.01, 0.2, 0.01, 0.05, "mol/(L s)"),
            ParameterSpec("temperature", 20.0, 200.0, 1.0, 80.0, "K"),
        ),
    ),
    ProcessKind.CRYSTALLIZATION: ParameterSchema(
        kind=ProcessKind.CRYSTALLIZATION,
        parameters=(
            ParameterSpec("temperature", 0.0, 100.0, 1.0, 25.0),
            ParameterSpec("concentration", 0.0, 100.0, 1.0, 75.0, "%"),
            ParameterSpec("coolingRate", 0.0, 10.0, 0.1, 2.0, "K/s"),
            ParameterSpec("saturationLevel", 0.0, 1.0, 0.05, 0.5, "", False),
        ),
    ),
}


def _variants(
    kind: ProcessKind, *entries: tuple[str, ModelFunction, str]
) -> Mapping[str, ModelVariant]:
    return MappingProxyType(
        {
            version: ModelVariant(kind=kind, version=version, function=function, description=text)
            for version, function, text in entries
        }
    )


_MODELS: dict[ProcessKind, Mapping[str, ModelVariant]] = {
    ProcessKind.DISTILLATION: _variants(
        ProcessKind.DISTILLATION,
        ("basic", simulate_distillation_basic, "Linear plate/reflux correlation"),
        ("extended", simulate_distillation_extended, "Exponential stage model, column profiles"),
    ),
    ProcessKind.FILTRATION: _variants(
        ProcessKind.FILTRATION,
        ("basic", simulate_filtration_basic, "Inverse size/viscosity rate law"),
        ("extended", simulate_filtration_extended, "Cake resistance model with settling velocity"),
    ),
    ProcessKind.FERMENTATION: _variants(
        ProcessKind.FERMENTATION,
        ("basic", simulate_fermentation_basic, "Empirical batch yield"),
        ("extended", simulate_fermentation_extended, "Monod kinetics, fixed-step integration"),
    ),
    ProcessKind.REACTOR_DESIGN: _variants(
        ProcessKind.REACTOR_DESIGN,
        ("basic", simulate_reactor_basic, "Linear space-time conversion"),
        ("extended", simulate_reactor_extended, "Arrhenius tanks-in-series, Ergun bed"),
    ),
    ProcessKind.CRYSTALLIZATION: _variants(
        ProcessKind.CRYSTALLIZATION,
        ("basic", simulate_crystallization_basic, "Closed-form yield and crystal size"),
    ),
}

DEFAULT_VERSIONS: Mapping[ProcessKind, str] = MappingProxyType(
    {
        ProcessKind.DISTILLATION: "extended",
        ProcessKind.FILTRATION: "extended",
        ProcessKind.FERMENTATION: "extended",
        ProcessKind.REACTOR_DESIGN: "extended",
        ProcessKind.CRYSTALLIZATION: "basic",
    }
)

# Processes whose time-stepped model consults a random source.
STOCHASTIC_PROCESSES = frozenset({ProcessKind.CRYSTALLIZATION})


def resolve_kind(kind: str | ProcessKind) -> ProcessKind:
    try:
        return ProcessKind(kind)
    except ValueError:
        raise UnknownProcessError(kind) from None


def list_processes() -> tuple[ProcessKind, ...]:
    return tuple(ProcessKind)


def get_schema(kind: str | ProcessKind) -> ParameterSchema:
    return _SCHEMAS[resolve_kind(kind)]


def model_versions(kind: str | ProcessKind) -> tuple[str, ...]:
    return tuple(_MODELS[resolve_kind(kind)])


def default_version(kind: str | ProcessKind) -> str:
    return DEFAULT_VERSIONS[resolve_kind(kind)]


def get_model(kind: str | ProcessKind, version: str | None = None) -> ModelVariant:
    process = resolve_kind(kind)
    variants = _MODELS[process]
    selected = DEFAULT_VERSIONS[process] if version is None else version
    try:
        return variants[selected]
    except KeyError:
        raise UnknownVariantError(process.value, selected, tuple(variants)) from None


__all__ = [
    "ProcessKind",
    "ModelVariant",
    "ModelFunction",
    "DEFAULT_VERSIONS",
    "STOCHASTIC_PROCESSES",
    "resolve_kind",
    "list_processes",
    "get_schema",
    "get_model",
    "model_versions",
    "default_version",
]
