from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass
from functools import reduce

from procsim.models.common import (
    EPSILON,
    ParameterSet,
    ResultSet,
    clamp,
    read_parameters,
    safe_power,
    sanitize_results,
)

MAX_GROWTH_RATE = 0.3  # 1/h
MONOD_KS = 2.0  # g/L
YIELD_COEFFICIENT = 0.485  # g ethanol / g sugar
MAINTENANCE_COEFFICIENT = 0.05  # g sugar / g biomass / h
DEATH_RATE = 0.01  # 1/h
PRODUCT_FORMATION_FRACTION = 0.9
OPTIMAL_TEMPERATURE_C = 30.0
OPTIMAL_PH = 5.0
INITIAL_BIOMASS = 1.0  # g/L
TIME_STEP_H = 0.1

REQUIRED_PARAMETERS = ("temperature", "pH", "sugarConcentration", "time")


@dataclass(frozen=True)
class FermentationState:
    time_h: float
    biomass: float
    substrate: float
    product: float

    def to_dict(self) -> dict[str, float]:
        return {
            "time": self.time_h,
            "biomassConcentration": self.biomass,
            "substrateRemaining": self.substrate,
            "alcoholContent": self.product,
        }


def simulate_fermentation_basic(parameters: ParameterSet) -> ResultSet:
    """Empirical yield scaled by sugar, pH deviation from 7, temperature and batch time."""
    values = read_parameters(parameters, REQUIRED_PARAMETERS)
    yields = (
        values["sugarConcentration"]
        * 0.5
        * (1.0 - abs(values["pH"] - 7.0) * 0.1)
        * (values["temperature"] / 30.0)
        * (values["time"] / 72.0)
    )
    return sanitize_results(
        {
            "yield": clamp(yields, 0.0, 100.0),
            "alcoholContent": max(0.0, yields * 0.48),
        }
    )


def max_specific_growth_rate(temperature_c: float, ph: float) -> float:
    temp_factor = math.exp(-safe_power(temperature_c - OPTIMAL_TEMPERATURE_C, 2) / 100.0)
    ph_factor = math.exp(-safe_power(ph - OPTIMAL_PH, 2) / 2.0)
    return MAX_GROWTH_RATE * temp_factor * ph_factor


def step_count(duration_h: float, dt_h: float = TIME_STEP_H) -> int:
    return max(0, int(math.floor(duration_h / dt_h)))


def advance(
    state: FermentationState, mu_max: float, dt_h: float = TIME_STEP_H
) -> FermentationState:
    """One explicit Euler step of Monod growth with maintenance and death.

    Biomass, substrate and product all use the growth rate evaluated at the
    start of the step.
    """
    mu = mu_max * (state.substrate / (MONOD_KS + state.substrate))
    growth = mu * state.biomass
    biomass = state.biomass + (growth - DEATH_RATE * state.biomass) * dt_h
    substrate = max(
        0.0,
        state.substrate
        - (growth / YIELD_COEFFICIENT + MAINTENANCE_COEFFICIENT * state.biomass) * dt_h,
    )
    product = state.product + growth * YIELD_COEFFICIENT * PRODUCT_FORMATION_FRACTION * dt_h
    return FermentationState(
        time_h=state.time_h + dt_h,
        biomass=biomass,
        substrate=substrate,
        product=product,
    )


def initial_state(sugar_concentration: float) -> FermentationState:
    return FermentationState(
        time_h=0.0,
        biomass=INITIAL_BIOMASS,
        substrate=max(0.0, sugar_concentration),
        product=0.0,
    )


def iter_states(
    parameters: ParameterSet, duration_h: float | None = None
) -> Iterator[FermentationState]:
    """Yield the initial state followed by the state after every time step."""
    values = read_parameters(parameters, REQUIRED_PARAMETERS)
    mu_max = max_specific_growth_rate(values["temperature"], values["pH"])
    horizon = values["time"] if duration_h is None else duration_h
    state = initial_state(values["sugarConcentration"])
    yield state
    for _ in range(step_count(horizon)):
        state = advance(state, mu_max)
        yield state


def simulate_fermentation_extended(parameters: ParameterSet) -> ResultSet:
    """Monod batch fermentation integrated over ``time`` hours; only the end state is reported."""
    values = read_parameters(parameters, REQUIRED_PARAMETERS)
    sugar = values["sugarConcentration"]
    batch_time = values["time"]
    mu_max = max_specific_growth_rate(values["temperature"], values["pH"])

    final = reduce(
        lambda state, _: advance(state, mu_max),
        range(step_count(batch_time)),
        initial_state(sugar),
    )

    consumed = sugar - final.substrate
    substrate_utilization = consumed / sugar * 100.0 if sugar > 0 else 0.0
    actual_yield = final.product / consumed if consumed > EPSILON else 0.0
    yield_efficiency = actual_yield / YIELD_COEFFICIENT * 100.0

    return sanitize_results(
        {
            "yield": min(100.0, substrate_utilization),
            "substrateUtilization": substrate_utilization,
            "alcoholContent": max(0.0, final.product),
            "biomassConcentration": final.biomass,
            "substrateRemaining": final.substrate,
            "yieldEfficiency": min(100.0, yield_efficiency),
            "productivityRate": final.product / batch_time if batch_time > 0 else 0.0,
            "metabolicEfficiency": yield_efficiency,
        }
    )


__all__ = [
    "FermentationState",
    "simulate_fermentation_basic",
    "simulate_fermentation_extended",
    "max_specific_growth_rate",
    "advance",
    "initial_state",
    "iter_states",
    "step_count",
    "MAX_GROWTH_RATE",
    "MONOD_KS",
    "YIELD_COEFFICIENT",
    "MAINTENANCE_COEFFICIENT",
    "DEATH_RATE",
    "TIME_STEP_H",
]
