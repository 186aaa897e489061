from __future__ import annotations

import math

import numpy as np

from procsim.models.common import (
    ParameterSet,
    ResultSet,
    clamp,
    floor_positive,
    read_parameters,
    sanitize_results,
)

MIN_REFLUX_RATIO = 0.5
STAGE_EFFICIENCY = 0.7
MAX_BASIC_SEPARATION = 99.0
MAX_PRODUCT_PURITY = 99.9
BOTTOM_TEMPERATURE_OFFSET_C = 10.0
TOP_TEMPERATURE_OFFSET_C = -5.0
MAX_PROFILE_POINTS = 200

DEFAULT_FEED_COMPOSITION = 0.5
DEFAULT_PRESSURE_PA = 101325.0
DEFAULT_FEED_TEMPERATURE_C = 78.0

REQUIRED_PARAMETERS = ("feedRate", "refluxRatio", "numberOfPlates")
OPTIONAL_PARAMETERS = {
    "feedComposition": DEFAULT_FEED_COMPOSITION,
    "pressure": DEFAULT_PRESSURE_PA,
    "feedTemperature": DEFAULT_FEED_TEMPERATURE_C,
}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def simulate_distillation_basic(parameters: ParameterSet) -> ResultSet:
    """Linear plate/reflux correlation, separation capped at 99 %."""
    values = read_parameters(parameters, REQUIRED_PARAMETERS)
    separation = values["numberOfPlates"] * 0.1 + values["refluxRatio"] * 0.2
    energy_consumption = values["feedRate"] * (1.0 + values["refluxRatio"]) * 0.5
    return sanitize_results(
        {
            "separation": min(MAX_BASIC_SEPARATION, separation),
            "energyConsumption": energy_consumption,
        }
    )


def simulate_distillation_extended(parameters: ParameterSet) -> ResultSet:
    """Exponential stage model with linear temperature and composition profiles.

    The column is described bottom (index 0) to top. Profiles hold one
    point per whole plate, up to ``MAX_PROFILE_POINTS``. Temperatures run from
    ``feedTemperature + 10`` to ``feedTemperature - 5`` and liquid composition
    from the feed composition to the product purity fraction.
    """
    values = read_parameters(parameters, REQUIRED_PARAMETERS, OPTIONAL_PARAMETERS)
    feed_rate = values["feedRate"]
    number_of_plates = values["numberOfPlates"]

    actual_reflux_ratio = max(values["refluxRatio"], MIN_REFLUX_RATIO)
    theoretical_stages = number_of_plates * STAGE_EFFICIENCY
    separation = (1.0 - math.exp(-theoretical_stages / floor_positive(actual_reflux_ratio))) * 100.0
    energy_consumption = feed_rate * actual_reflux_ratio * 0.1
    product_purity = min(MAX_PRODUCT_PURITY, separation * 0.9)

    plate_count = int(clamp(math.floor(number_of_plates), 0, MAX_PROFILE_POINTS))
    feed_temperature = values["feedTemperature"]
    temperatures = np.linspace(
        feed_temperature + BOTTOM_TEMPERATURE_OFFSET_C,
        feed_temperature + TOP_TEMPERATURE_OFFSET_C,
        plate_count,
    )
    compositions = np.linspace(
        clamp(values["feedComposition"], 0.0, 1.0),
        product_purity / 100.0,
        plate_count,
    )

    return sanitize_results(
        {
            "separation": separation,
            "energyConsumption": energy_consumption,
            "productPurity": product_purity,
            "numberOfTheoreticalStages": _round_half_up(theoretical_stages),
            "actualRefluxRatio": actual_reflux_ratio,
            "temperatures": temperatures.tolist(),
            "compositions": compositions.tolist(),
            "pressureDrop": number_of_plates * 0.1 * (feed_rate / 100.0),
        }
    )


__all__ = [
    "simulate_distillation_basic",
    "simulate_distillation_extended",
    "MIN_REFLUX_RATIO",
    "STAGE_EFFICIENCY",
    "MAX_PROFILE_POINTS",
    "DEFAULT_FEED_COMPOSITION",
    "DEFAULT_PRESSURE_PA",
    "DEFAULT_FEED_TEMPERATURE_C",
]
