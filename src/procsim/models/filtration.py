from __future__ import annotations

import math
from typing import Protocol

import numpy as np

from procsim.models.common import (
    ParameterSet,
    ResultSet,
    clamp,
    floor_positive,
    read_parameters,
    safe_power,
    sanitize_results,
)

GRAVITY = 9.81
FLUID_DENSITY = 1000.0
PARTICLE_DENSITY = 2500.0
DARCY_COEFFICIENT = 1.75
KOZENY_CONSTANT = 5.0

MIN_PARTICLE_SIZE_MM = 0.001
MIN_FLUID_VISCOSITY_CP = 0.1
MIN_FILTER_AREA = 0.1
BASE_CAKE_RESISTANCE = 1e11
MAX_CAKE_THICKNESS = 0.1
MAX_SAMPLED_CAKE_THICKNESS = 0.2
STOKES_REYNOLDS_LIMIT = 1.0

# (particle count, size divisor) per visual particle class.
PARTICLE_CLASSES: dict[str, tuple[int, float]] = {
    "large": (100, 1.0),
    "medium": (150, 2.0),
    "small": (200, 4.0),
}

REQUIRED_PARAMETERS = ("particleSize", "fluidViscosity", "filterArea")


class BinomialSource(Protocol):
    def binomial(self, n: int, p: float) -> int: ...


def _floored_inputs(parameters: ParameterSet) -> tuple[float, float, float]:
    values = read_parameters(parameters, REQUIRED_PARAMETERS)
    particle_size = max(MIN_PARTICLE_SIZE_MM, values["particleSize"])
    fluid_viscosity = max(MIN_FLUID_VISCOSITY_CP, values["fluidViscosity"])
    filter_area = max(MIN_FILTER_AREA, values["filterArea"])
    return particle_size, fluid_viscosity, filter_area


def simulate_filtration_basic(parameters: ParameterSet) -> ResultSet:
    """Inverse size/viscosity rate law; efficiency falls linearly with particle size."""
    values = read_parameters(parameters, REQUIRED_PARAMETERS)
    resistance = floor_positive(values["particleSize"] * values["fluidViscosity"])
    filtration_rate = (values["filterArea"] * 0.1) / resistance
    filtration_efficiency = 100.0 - values["particleSize"] * 10.0
    return sanitize_results(
        {
            "filtrationRate": max(0.0, filtration_rate),
            "filtrationEfficiency": clamp(filtration_efficiency, 0.0, 100.0),
        }
    )


def terminal_velocity(particle_size_mm: float, fluid_viscosity_cp: float) -> tuple[float, float]:
    """Return ``(settling velocity m/s, particle Reynolds number)``.

    Stokes law below a particle Reynolds number of 1, Newton regime above it.
    """
    diameter_m = max(MIN_PARTICLE_SIZE_MM, particle_size_mm) * 1e-3
    viscosity_pa_s = max(MIN_FLUID_VISCOSITY_CP, fluid_viscosity_cp) * 1e-3
    density_difference = PARTICLE_DENSITY - FLUID_DENSITY
    reynolds = (FLUID_DENSITY * diameter_m * diameter_m * GRAVITY) / (18.0 * viscosity_pa_s)
    if reynolds < STOKES_REYNOLDS_LIMIT:
        velocity = (diameter_m * diameter_m * density_difference * GRAVITY) / (
            18.0 * viscosity_pa_s
        )
    else:
        velocity = math.sqrt(
            (4.0 * diameter_m * density_difference * GRAVITY)
            / (3.0 * FLUID_DENSITY * DARCY_COEFFICIENT)
        )
    return velocity, reynolds


def kozeny_carman_permeability(porosity: float, particle_size_mm: float) -> float:
    diameter_m = particle_size_mm * 1e-3
    solid_fraction = floor_positive(1.0 - porosity)
    return (porosity * porosity * diameter_m * diameter_m) / (
        KOZENY_CONSTANT * solid_fraction * solid_fraction
    )


def simulate_filtration_extended(parameters: ParameterSet) -> ResultSet:
    """Cake-filtration model built on a size-dependent specific cake resistance.

    Unlike the basic rate law, capture efficiency here rises with particle
    size: ``(1 - exp(-10 d)) * 100``.
    """
    particle_size, fluid_viscosity, filter_area = _floored_inputs(parameters)

    porosity = 0.4 - 0.1 * particle_size
    specific_cake_resistance = BASE_CAKE_RESISTANCE * safe_power(particle_size, -1.5)
    cake_resistance = floor_positive(fluid_viscosity * specific_cake_resistance)
    flow_rate = (filter_area * (1.0 - porosity)) / cake_resistance
    efficiency = (1.0 - math.exp(-particle_size * 10.0)) * 100.0
    pressure_drop = flow_rate * fluid_viscosity * specific_cake_resistance / filter_area
    velocity, particle_reynolds = terminal_velocity(particle_size, fluid_viscosity)

    return sanitize_results(
        {
            "filtrationRate": max(0.0, flow_rate * 3600.0),
            "filtrationEfficiency": clamp(efficiency, 0.0, 100.0),
            "pressureDrop": max(0.0, pressure_drop),
            "porosity": porosity * 100.0,
            "cakeThickness": min(MAX_CAKE_THICKNESS, flow_rate * specific_cake_resistance * 0.01),
            "permeability": kozeny_carman_permeability(porosity, particle_size),
            "terminalVelocity": velocity,
            "particleReynoldsNumber": particle_reynolds,
        }
    )


def sample_capture(
    parameters: ParameterSet,
    rng: BinomialSource | None = None,
) -> ResultSet:
    """Sample how many particles of each size class the filter medium retains.

    Stochastic: every call draws from ``rng``. Pass a seeded
    ``numpy.random.Generator`` for reproducible counts.
    """
    particle_size, _, _ = _floored_inputs(parameters)
    generator = rng if rng is not None else np.random.default_rng()

    results: dict[str, float | int] = {}
    captured_total = 0
    particle_total = 0
    for name, (count, divisor) in PARTICLE_CLASSES.items():
        probability = clamp(1.0 - particle_size / divisor, 0.0, 1.0)
        captured = int(generator.binomial(count, probability))
        results[f"captured{name.capitalize()}"] = captured
        captured_total += captured
        particle_total += count

    results["capturedTotal"] = captured_total
    results["captureFraction"] = captured_total / particle_total
    results["cakeThickness"] = min(MAX_SAMPLED_CAKE_THICKNESS, captured_total * 1e-4)
    return sanitize_results(results)


__all__ = [
    "simulate_filtration_basic",
    "simulate_filtration_extended",
    "sample_capture",
    "terminal_velocity",
    "kozeny_carman_permeability",
    "PARTICLE_CLASSES",
    "GRAVITY",
    "FLUID_DENSITY",
    "PARTICLE_DENSITY",
    "DARCY_COEFFICIENT",
    "KOZENY_CONSTANT",
]
