from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass, replace
from typing import Protocol

from procsim.models.common import (
    ParameterSet,
    ResultSet,
    clamp,
    read_parameters,
    sanitize_results,
)

NUCLEATION_THRESHOLD = 0.1
GROWTH_RATE_CONSTANT = 0.01
PROGRESS_RATE = 0.1
TEMPERATURE_FLOOR_K = 50.0
DEFAULT_STEPPED_TEMPERATURE_K = 300.0
FRAME_TOLERANCE = 1e-9
MAX_CRYSTALS = 50
INITIAL_CRYSTAL_SIZE = 0.1
INITIAL_SIZE_SPREAD = 0.05
MIN_MAX_CRYSTAL_SIZE = 0.5
MAX_SIZE_SPREAD = 0.5
DEFAULT_SATURATION_LEVEL = 0.5

REQUIRED_PARAMETERS = ("temperature", "concentration", "coolingRate")
STEPPED_REQUIRED_PARAMETERS = ("coolingRate",)
STEPPED_OPTIONAL_PARAMETERS = {"temperature": DEFAULT_STEPPED_TEMPERATURE_K}


@dataclass(frozen=True)
class Liquid:
    name: str
    density: float
    viscosity: float
    boiling_point_k: float
    freezing_point_k: float


LIQUIDS: dict[str, Liquid] = {
    "water": Liquid("Water", 1000.0, 1.0, 373.15, 273.15),
    "ethanol": Liquid("Ethanol", 789.0, 1.2, 351.15, 159.15),
    "glycerol": Liquid("Glycerol", 1260.0, 1.412, 563.15, 291.15),
    "acetone": Liquid("Acetone", 784.0, 0.316, 329.15, 178.15),
}

# Relative growth speed per crystal habit.
CRYSTAL_HABITS: dict[str, float] = {
    "cubic": 1.0,
    "octahedral": 0.8,
    "hexagonal": 1.2,
}


class UniformSource(Protocol):
    def random(self) -> float: ...


@dataclass(frozen=True)
class Crystal:
    size: float
    max_size: float

    def grow(self, amount: float) -> Crystal:
        if self.size >= self.max_size:
            return self
        return replace(self, size=min(self.max_size, self.size + amount))


@dataclass(frozen=True)
class CrystallizerState:
    time: float
    temperature: float
    progress: float = 0.0
    crystals: tuple[Crystal, ...] = ()

    def to_dict(self, freezing_point_k: float) -> ResultSet:
        sizes = [crystal.size for crystal in self.crystals]
        return sanitize_results(
            {
                "time": self.time,
                "temperature": self.temperature,
                "crystallizationProgress": self.progress,
                "crystalCount": len(self.crystals),
                "meanCrystalSize": sum(sizes) / len(sizes) if sizes else 0.0,
                "largestCrystalSize": max(sizes, default=0.0),
                "supercooling": max(0.0, freezing_point_k - self.temperature),
            }
        )


def simulate_crystallization_basic(parameters: ParameterSet) -> ResultSet:
    """Closed-form cooling-crystallization yield and mean crystal size."""
    values = read_parameters(parameters, REQUIRED_PARAMETERS)
    temperature = values["temperature"]
    concentration = values["concentration"]
    cooling_rate = values["coolingRate"]

    yield_percentage = 100.0 - temperature * 0.5 + concentration * 0.3 - cooling_rate * 0.2
    crystal_size = (100.0 - temperature) * 0.1 + concentration * 0.05 - cooling_rate * 0.02
    return sanitize_results(
        {
            "yieldPercentage": clamp(yield_percentage, 0.0, 100.0),
            "crystalSize": max(0.0, crystal_size),
        }
    )


def _saturation_level(parameters: ParameterSet) -> float:
    if parameters.get("saturationLevel") is not None:
        level = read_parameters(parameters, ("saturationLevel",))["saturationLevel"]
    elif parameters.get("concentration") is not None:
        level = read_parameters(parameters, ("concentration",))["concentration"] / 100.0
    else:
        return DEFAULT_SATURATION_LEVEL
    return clamp(level, 0.0, 1.0)


def frame_count(duration: float, dt: float) -> int:
    """Number of whole ``dt`` frames in ``duration``, tolerant of float rounding."""
    return max(0, int(math.floor(duration / dt + FRAME_TOLERANCE)))


def lookup_liquid(name: str) -> Liquid:
    try:
        return LIQUIDS[name]
    except KeyError:
        msg = f"Unknown liquid {name!r}; expected one of {', '.join(LIQUIDS)}"
        raise ValueError(msg) from None


def lookup_habit(name: str) -> float:
    try:
        return CRYSTAL_HABITS[name]
    except KeyError:
        msg = f"Unknown crystal habit {name!r}; expected one of {', '.join(CRYSTAL_HABITS)}"
        raise ValueError(msg) from None


def step_crystallizer(
    state: CrystallizerState,
    *,
    cooling_rate: float,
    saturation_level: float,
    freezing_point_k: float,
    habit_factor: float,
    dt: float,
    rng: UniformSource,
) -> CrystallizerState:
    """Advance the crystallizer one frame: cool, accumulate progress, grow, nucleate.

    Cooling stops at ``TEMPERATURE_FLOOR_K``; a state already below the floor
    is never warmed up to it.

    Nucleation is stochastic; ``rng.random()`` is consulted once per frame while
    supercooled and twice more when a crystal is spawned.
    """
    temperature = max(
        min(state.temperature, TEMPERATURE_FLOOR_K), state.temperature - cooling_rate * dt
    )
    supercooling = freezing_point_k - temperature

    progress = state.progress
    if supercooling > 0:
        progress = min(1.0, progress + PROGRESS_RATE * dt)

    crystals = state.crystals
    if supercooling > 0:
        driving_force = supercooling * cooling_rate * saturation_level
        growth = GROWTH_RATE_CONSTANT * driving_force * habit_factor * dt
        crystals = tuple(crystal.grow(growth) for crystal in crystals)

    if (
        supercooling > 0
        and len(crystals) < MAX_CRYSTALS
        and rng.random() < NUCLEATION_THRESHOLD * saturation_level * dt
    ):
        nucleus = Crystal(
            size=INITIAL_CRYSTAL_SIZE + INITIAL_SIZE_SPREAD * rng.random(),
            max_size=MIN_MAX_CRYSTAL_SIZE + MAX_SIZE_SPREAD * rng.random(),
        )
        crystals = (*crystals, nucleus)

    return CrystallizerState(
        time=state.time + dt,
        temperature=temperature,
        progress=progress,
        crystals=crystals,
    )


def iter_crystallizer(
    parameters: ParameterSet,
    duration: float,
    *,
    dt: float,
    rng: UniformSource,
    liquid: str = "water",
    habit: str = "cubic",
) -> Iterator[ResultSet]:
    """Yield a snapshot for the initial state and after each of ``frame_count`` frames.

    ``temperature`` is optional and defaults to ``DEFAULT_STEPPED_TEMPERATURE_K``.
    """
    if dt <= 0:
        msg = "dt must be positive"
        raise ValueError(msg)
    values = read_parameters(parameters, STEPPED_REQUIRED_PARAMETERS, STEPPED_OPTIONAL_PARAMETERS)
    saturation_level = _saturation_level(parameters)
    freezing_point_k = lookup_liquid(liquid).freezing_point_k
    habit_factor = lookup_habit(habit)

    state = CrystallizerState(time=0.0, temperature=values["temperature"])
    yield state.to_dict(freezing_point_k)
    for _ in range(frame_count(duration, dt)):
        state = step_crystallizer(
            state,
            cooling_rate=values["coolingRate"],
            saturation_level=saturation_level,
            freezing_point_k=freezing_point_k,
            habit_factor=habit_factor,
            dt=dt,
            rng=rng,
        )
        yield state.to_dict(freezing_point_k)


__all__ = [
    "Liquid",
    "LIQUIDS",
    "CRYSTAL_HABITS",
    "Crystal",
    "CrystallizerState",
    "simulate_crystallization_basic",
    "step_crystallizer",
    "iter_crystallizer",
    "frame_count",
    "lookup_liquid",
    "lookup_habit",
    "NUCLEATION_THRESHOLD",
    "MAX_CRYSTALS",
    "TEMPERATURE_FLOOR_K",
    "DEFAULT_STEPPED_TEMPERATURE_K",
    "STEPPED_REQUIRED_PARAMETERS",
    "STEPPED_OPTIONAL_PARAMETERS",
]
