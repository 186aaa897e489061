from __future__ import annotations

import math

from procsim.models.common import (
    ParameterSet,
    ResultSet,
    floor_positive,
    read_parameters,
    safe_power,
    sanitize_results,
)

GAS_CONSTANT_J_PER_MOLK = 8.314
FLUID_VISCOSITY_PA_S = 0.001
FLUID_DENSITY_KG_PER_M3 = 1000.0
ACTIVATION_ENERGY_J_PER_MOL = 50_000.0
PRE_EXPONENTIAL_FACTOR = 1e6
REACTION_ENTHALPY_J_PER_MOL = -100_000.0
VOID_FRACTION = 0.4
PARTICLE_DIAMETER_M = 0.005
LAMINAR_REYNOLDS_LIMIT = 2300.0
TURBULENT_REYNOLDS_LIMIT = 4000.0
REYNOLDS_PER_IDEAL_TANK = 1000.0
MAX_BASIC_CONVERSION = 99.0
MAX_CONVERSION = 99.9

REQUIRED_PARAMETERS = ("reactorVolume", "flowRate", "reactionRate", "temperature")


def simulate_reactor_basic(parameters: ParameterSet) -> ResultSet:
    """Linear conversion estimate from reaction rate and space time."""
    values = read_parameters(parameters, REQUIRED_PARAMETERS)
    reactor_volume = values["reactorVolume"]
    flow_rate = floor_positive(values["flowRate"])
    reaction_rate = values["reactionRate"]
    return sanitize_results(
        {
            "conversionRate": min(MAX_BASIC_CONVERSION, reaction_rate * reactor_volume / flow_rate),
            "residenceTime": reactor_volume / flow_rate,
            "heatGenerated": reaction_rate * reactor_volume * 100.0,
        }
    )


def mixing_efficiency(reynolds_number: float) -> float:
    if reynolds_number > TURBULENT_REYNOLDS_LIMIT:
        return 0.95
    if reynolds_number > LAMINAR_REYNOLDS_LIMIT:
        return 0.7
    return 0.4


def arrhenius_rate_constant(temperature_k: float) -> float:
    return PRE_EXPONENTIAL_FACTOR * math.exp(
        -ACTIVATION_ENERGY_J_PER_MOL / (GAS_CONSTANT_J_PER_MOLK * floor_positive(temperature_k))
    )


def ergun_pressure_drop(superficial_velocity: float) -> float:
    """Packed-bed pressure gradient (Pa/m) for the fixed void fraction and particle size."""
    solid = 1.0 - VOID_FRACTION
    void_cubed = VOID_FRACTION**3
    viscous = (150.0 * FLUID_VISCOSITY_PA_S * solid * solid * superficial_velocity) / (
        PARTICLE_DIAMETER_M**2 * void_cubed
    )
    velocity_squared = safe_power(superficial_velocity, 2)
    inertial = (1.75 * FLUID_DENSITY_KG_PER_M3 * solid * velocity_squared) / (
        PARTICLE_DIAMETER_M * void_cubed
    )
    return viscous + inertial


def simulate_reactor_extended(parameters: ParameterSet) -> ResultSet:
    """Tanks-in-series reactor with Arrhenius kinetics and a Reynolds-based mixing regime.

    ``temperature`` is taken in kelvin for the rate constant. The number of
    ideal tanks grows with turbulence (one tank per 1000 of Reynolds number),
    and the Damköhler number uses the mixing-corrected residence time.
    """
    values = read_parameters(parameters, REQUIRED_PARAMETERS)
    reactor_volume = floor_positive(values["reactorVolume"])
    flow_rate = floor_positive(values["flowRate"])
    reaction_rate = values["reactionRate"]

    characteristic_length = reactor_volume ** (1.0 / 3.0)
    cross_section = math.pi * safe_power(characteristic_length / 2.0, 2)
    superficial_velocity = flow_rate / cross_section
    reynolds_number = (
        FLUID_DENSITY_KG_PER_M3 * superficial_velocity * characteristic_length
    ) / FLUID_VISCOSITY_PA_S

    mixing = mixing_efficiency(reynolds_number)
    rate_constant = arrhenius_rate_constant(values["temperature"])
    effective_residence_time = (reactor_volume / flow_rate) * mixing
    damkohler_number = rate_constant * effective_residence_time

    tank_estimate = reynolds_number / REYNOLDS_PER_IDEAL_TANK
    number_of_ideal_tanks = max(1, int(tank_estimate)) if math.isfinite(tank_estimate) else 1
    conversion_per_tank = 1.0 - math.exp(-damkohler_number / number_of_ideal_tanks)
    total_conversion = (1.0 - (1.0 - conversion_per_tank) ** number_of_ideal_tanks) * 100.0
    conversion_rate = min(MAX_CONVERSION, total_conversion)

    heat_generated = (
        REACTION_ENTHALPY_J_PER_MOL * reaction_rate * reactor_volume * (total_conversion / 100.0)
    )

    return sanitize_results(
        {
            "conversionRate": conversion_rate,
            "residenceTime": effective_residence_time,
            "heatGenerated": heat_generated,
            "reynoldsNumber": reynolds_number,
            "mixingEfficiency": mixing * 100.0,
            "pressureDrop": ergun_pressure_drop(superficial_velocity),
            "numberOfIdealTanks": number_of_ideal_tanks,
            "damkohlerNumber": damkohler_number,
            "rateConstant": rate_constant,
        }
    )


__all__ = [
    "simulate_reactor_basic",
    "simulate_reactor_extended",
    "mixing_efficiency",
    "arrhenius_rate_constant",
    "ergun_pressure_drop",
    "GAS_CONSTANT_J_PER_MOLK",
    "FLUID_VISCOSITY_PA_S",
    "REACTION_ENTHALPY_J_PER_MOL",
]
