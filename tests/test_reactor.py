from __future__ import annotations

import math

import pytest

from procsim.models.reactor import (
    arrhenius_rate_constant,
    ergun_pressure_drop,
    mixing_efficiency,
    simulate_reactor_basic,
    simulate_reactor_extended,
)

BASE = {"reactorVolume": 1000.0, "flowRate": 10.0, "reactionRate": 0.05, "temperature": 80.0}


def test_basic_space_time_conversion() -> None:
    results = simulate_reactor_basic(BASE)

    assert results["conversionRate"] == pytest.approx(5.0)
    assert results["residenceTime"] == pytest.approx(100.0)
    assert results["heatGenerated"] == pytest.approx(5000.0)


def test_basic_conversion_is_capped() -> None:
    results = simulate_reactor_basic({**BASE, "reactionRate": 5.0})

    assert results["conversionRate"] == 99.0


def test_extended_hydrodynamics() -> None:
    results = simulate_reactor_extended(BASE)

    assert results["reynoldsNumber"] == pytest.approx(1.2732e6, rel=1e-4)
    assert results["mixingEfficiency"] == pytest.approx(95.0)
    assert results["residenceTime"] == pytest.approx(95.0)
    assert results["numberOfIdealTanks"] == 1273
    assert isinstance(results["numberOfIdealTanks"], int)
    assert results["rateConstant"] == pytest.approx(arrhenius_rate_constant(80.0))
    assert 0.0 <= results["conversionRate"] <= 99.9


def test_extended_conversion_is_capped() -> None:
    results = simulate_reactor_extended(
        {"reactorVolume": 5000.0, "flowRate": 1.0, "reactionRate": 0.2, "temperature": 5000.0}
    )

    assert results["conversionRate"] == pytest.approx(99.9)
    assert results["heatGenerated"] < 0


def test_conversion_does_not_decrease_with_temperature() -> None:
    conversions = []
    rate_constants = []
    for temperature in range(20, 1001, 20):
        results = simulate_reactor_extended({**BASE, "temperature": float(temperature)})
        conversions.append(results["conversionRate"])
        rate_constants.append(results["rateConstant"])

    assert all(later >= earlier for earlier, later in zip(conversions, conversions[1:]))
    assert all(later > earlier for earlier, later in zip(rate_constants, rate_constants[1:]))
    assert max(conversions) <= 99.9


def test_mixing_regimes() -> None:
    assert mixing_efficiency(1000.0) == 0.4
    assert mixing_efficiency(3000.0) == 0.7
    assert mixing_efficiency(5000.0) == 0.95


def test_ergun_pressure_drop_grows_with_velocity() -> None:
    assert ergun_pressure_drop(0.0) == 0.0
    assert ergun_pressure_drop(0.2) > ergun_pressure_drop(0.1) > 0


def test_repeated_runs_are_identical() -> None:
    first = simulate_reactor_extended(BASE)
    second = simulate_reactor_extended(BASE)

    assert first == second
    assert all(math.isfinite(value) for value in first.values())


def test_extreme_flow_rate_is_sanitized() -> None:
    results = simulate_reactor_extended({**BASE, "flowRate": 1e160})

    assert math.isinf(ergun_pressure_drop(1e160))
    assert results["pressureDrop"] == 0.0
    assert results["numberOfIdealTanks"] >= 1
    assert all(math.isfinite(value) for value in results.values())
