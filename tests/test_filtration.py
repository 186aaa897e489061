from __future__ import annotations

import numpy as np
import pytest

from procsim.models.filtration import (
    sample_capture,
    simulate_filtration_basic,
    simulate_filtration_extended,
    terminal_velocity,
)

BASE = {"particleSize": 0.1, "fluidViscosity": 1.0, "filterArea": 10.0}


class _ExpectedValueBinomial:
    def __init__(self) -> None:
        self.calls: list[tuple[int, float]] = []

    def binomial(self, n: int, p: float) -> int:
        self.calls.append((n, p))
        return int(round(n * p))


def test_basic_rate_and_efficiency() -> None:
    results = simulate_filtration_basic(BASE)

    assert results["filtrationRate"] == pytest.approx(10.0)
    assert results["filtrationEfficiency"] == pytest.approx(99.0)


def test_basic_efficiency_decreases_with_particle_size() -> None:
    sizes = np.linspace(0.01, 1.0, 25)
    efficiencies = [
        simulate_filtration_basic({**BASE, "particleSize": float(size)})["filtrationEfficiency"]
        for size in sizes
    ]

    assert all(0.0 <= value <= 100.0 for value in efficiencies)
    assert all(later < earlier for earlier, later in zip(efficiencies, efficiencies[1:]))


def test_extended_cake_model() -> None:
    results = simulate_filtration_extended(BASE)

    assert results["filtrationEfficiency"] == pytest.approx(63.2121, rel=1e-4)
    assert results["pressureDrop"] == pytest.approx(0.61)
    assert results["cakeThickness"] == pytest.approx(0.061)
    assert results["porosity"] == pytest.approx(39.0)
    assert results["filtrationRate"] == pytest.approx(6.944e-9, rel=1e-3)
    assert results["terminalVelocity"] == pytest.approx(8.175e-3, rel=1e-3)
    assert results["particleReynoldsNumber"] < 1.0
    assert results["permeability"] > 0


def test_extended_floors_degenerate_inputs() -> None:
    results = simulate_filtration_extended(
        {"particleSize": 0.0, "fluidViscosity": 0.0, "filterArea": 0.0}
    )

    assert all(np.isfinite(value) for value in results.values())
    assert results["filtrationRate"] >= 0


def test_terminal_velocity_switches_to_newton_regime() -> None:
    velocity, reynolds = terminal_velocity(5.0, 0.1)

    assert reynolds > 1.0
    assert velocity == pytest.approx(np.sqrt((4.0 * 5e-3 * 1500.0 * 9.81) / (3.0 * 1000.0 * 1.75)))


def test_sample_capture_uses_class_probabilities() -> None:
    rng = _ExpectedValueBinomial()
    results = sample_capture(BASE, rng=rng)

    assert [n for n, _ in rng.calls] == [100, 150, 200]
    assert [p for _, p in rng.calls] == pytest.approx([0.9, 0.95, 0.975])
    assert results["capturedLarge"] == 90
    assert results["capturedMedium"] == 142
    assert results["capturedSmall"] == 195
    assert results["capturedTotal"] == 427
    assert results["captureFraction"] == pytest.approx(427 / 450)
    assert results["cakeThickness"] == pytest.approx(0.0427)


def test_sample_capture_never_retains_particles_at_class_limit() -> None:
    rng = _ExpectedValueBinomial()
    results = sample_capture({**BASE, "particleSize": 1.0}, rng=rng)

    assert results["capturedLarge"] == 0
    assert results["capturedMedium"] == 75
    assert results["capturedSmall"] == 150


def test_sample_capture_is_reproducible_with_seed() -> None:
    first = sample_capture(BASE, rng=np.random.default_rng(11))
    second = sample_capture(BASE, rng=np.random.default_rng(11))

    assert first == second
    assert 0 <= first["capturedTotal"] <= 450
    assert first["cakeThickness"] <= 0.2


def test_extended_survives_vanishing_cake_resistance() -> None:
    results = simulate_filtration_extended({**BASE, "particleSize": 1e250})

    assert results["filtrationEfficiency"] == 100.0
    assert results["cakeThickness"] == 0.0
    assert all(np.isfinite(value) for value in results.values())


def test_extended_efficiency_rises_with_particle_size() -> None:
    sizes = [0.01, 0.1, 0.5, 1.0]
    efficiencies = [
        simulate_filtration_extended({**BASE, "particleSize": size})["filtrationEfficiency"]
        for size in sizes
    ]

    assert efficiencies == sorted(efficiencies)
    assert efficiencies[0] < efficiencies[-1]
