import math

import pytest

from procsim.models.distillation import simulate_distillation_basic, simulate_distillation_extended

BASE = {"feedRate": 100.0, "refluxRatio": 3.0, "numberOfPlates": 20.0}


def test_basic_correlation_matches_linear_formula() -> None:
    results = simulate_distillation_basic(BASE)

    assert results["separation"] == pytest.approx(2.6)
    assert results["energyConsumption"] == pytest.approx(200.0)


def test_basic_separation_is_capped() -> None:
    results = simulate_distillation_basic({**BASE, "numberOfPlates": 2000.0})

    assert results["separation"] == 99.0


def test_extended_stage_model_and_profiles() -> None:
    results = simulate_distillation_extended(BASE)

    expected_separation = (1.0 - math.exp(-14.0 / 3.0)) * 100.0
    assert results["separation"] == pytest.approx(expected_separation)
    assert results["energyConsumption"] == pytest.approx(30.0)
    assert results["productPurity"] == pytest.approx(expected_separation * 0.9)
    assert results["numberOfTheoreticalStages"] == 14
    assert results["pressureDrop"] == pytest.approx(2.0)

    temperatures = results["temperatures"]
    compositions = results["compositions"]
    assert len(temperatures) == 20
    assert len(compositions) == 20
    assert temperatures[0] == pytest.approx(88.0)
    assert temperatures[-1] == pytest.approx(73.0)
    assert compositions[0] == pytest.approx(0.5)
    assert compositions[-1] == pytest.approx(expected_separation * 0.9 / 100.0)


def test_extended_enforces_minimum_reflux() -> None:
    results = simulate_distillation_extended({**BASE, "refluxRatio": 0.0})

    assert results["actualRefluxRatio"] == 0.5
    assert math.isfinite(results["separation"])


def test_extended_single_plate_profile() -> None:
    results = simulate_distillation_extended({**BASE, "numberOfPlates": 1.0})

    assert results["temperatures"] == [pytest.approx(88.0)]
    assert results["compositions"] == [pytest.approx(0.5)]


def test_extended_uses_optional_feed_conditions() -> None:
    results = simulate_distillation_extended(
        {**BASE, "feedComposition": 0.2, "feedTemperature": 100.0}
    )

    assert results["temperatures"][0] == pytest.approx(110.0)
    assert results["temperatures"][-1] == pytest.approx(95.0)
    assert results["compositions"][0] == pytest.approx(0.2)


def test_variants_disagree_for_identical_inputs() -> None:
    basic = simulate_distillation_basic(BASE)
    extended = simulate_distillation_extended(BASE)

    assert basic["separation"] != pytest.approx(extended["separation"])
