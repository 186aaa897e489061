from __future__ import annotations

import math

import pytest

from procsim.config import Settings
from procsim.engine import (
    build_visual_frame,
    simulate,
    simulate_clamped,
    simulate_over_time,
)
from procsim.errors import InvalidParameterError, UnknownProcessError
from procsim.models.crystallization import DEFAULT_STEPPED_TEMPERATURE_K
from procsim.models.distillation import MAX_PROFILE_POINTS
from procsim.models.fermentation import step_count
from procsim.registry import get_schema, list_processes, model_versions


def _finite(results: dict[str, object]) -> bool:
    for value in results.values():
        values = value if isinstance(value, list) else [value]
        if not all(math.isfinite(item) for item in values):
            return False
    return True


def test_fermentation_scenario() -> None:
    results = simulate(
        "fermentation", {"temperature": 30, "pH": 6.5, "sugarConcentration": 15, "time": 48}
    )

    assert results["yield"] > 0
    assert results["alcoholContent"] > 0
    assert results["yield"] <= 100


def test_filtration_scenario() -> None:
    results = simulate("filtration", {"particleSize": 0.1, "fluidViscosity": 1, "filterArea": 10})

    assert results["filtrationRate"] >= 0
    assert 0 <= results["filtrationEfficiency"] <= 100


def test_distillation_basic_scenario() -> None:
    results = simulate(
        "distillation",
        {"feedRate": 100, "refluxRatio": 3, "numberOfPlates": 20},
        version="basic",
    )

    assert results["separation"] <= 99


def test_unknown_process_scenario() -> None:
    with pytest.raises(UnknownProcessError):
        simulate("nuclearFission", {})


def test_missing_parameter_is_reported_by_name() -> None:
    with pytest.raises(InvalidParameterError) as excinfo:
        simulate("reactorDesign", {"reactorVolume": 1000, "flowRate": 10, "reactionRate": 0.05})

    assert excinfo.value.name == "temperature"


def test_reactor_results_are_idempotent() -> None:
    parameters = {"reactorVolume": 1000, "flowRate": 10, "reactionRate": 0.05, "temperature": 80}

    first = simulate("reactorDesign", parameters)
    second = simulate("reactorDesign", parameters)

    assert first["conversionRate"] == second["conversionRate"]
    assert first == second


def test_simulate_leaves_parameters_untouched() -> None:
    parameters = {"feedRate": 100.0, "refluxRatio": 3.0, "numberOfPlates": 20.0}
    snapshot = dict(parameters)

    simulate("distillation", parameters)

    assert parameters == snapshot


@pytest.mark.parametrize("corner", ["minimum", "default", "maximum"])
def test_all_models_return_finite_results_across_schema_ranges(corner: str) -> None:
    for kind in list_processes():
        parameters = {spec.name: getattr(spec, corner) for spec in get_schema(kind)}
        for version in model_versions(kind):
            results = simulate(kind, parameters, version=version)
            assert results
            assert _finite(results), (kind, version, results)


@pytest.mark.parametrize(
    ("kind", "name", "value"),
    [
        ("reactorDesign", "flowRate", 1e160),
        ("reactorDesign", "temperature", 1e300),
        ("filtration", "particleSize", 1e250),
        ("filtration", "fluidViscosity", 1e300),
        ("fermentation", "temperature", 1e200),
        ("fermentation", "pH", -1e200),
        ("distillation", "numberOfPlates", 1e160),
        ("crystallization", "concentration", 1e300),
    ],
)
def test_extreme_finite_inputs_yield_finite_results(kind: str, name: str, value: float) -> None:
    parameters = {**get_schema(kind).defaults(), name: value}
    for version in model_versions(kind):
        results = simulate(kind, parameters, version=version)
        assert results
        assert _finite(results), (kind, version, results)


def test_distillation_profiles_are_capped() -> None:
    results = simulate("distillation", {"feedRate": 100, "refluxRatio": 3, "numberOfPlates": 1e9})

    assert len(results["temperatures"]) == MAX_PROFILE_POINTS
    assert len(results["compositions"]) == MAX_PROFILE_POINTS


def test_simulate_clamped_limits_out_of_range_inputs() -> None:
    clamped = simulate_clamped(
        "distillation",
        {"feedRate": 1000.0, "refluxRatio": 3.0, "numberOfPlates": 20.0},
    )

    assert clamped["energyConsumption"] == pytest.approx(200.0 * 3.0 * 0.1)


def test_build_visual_frame_is_json_safe_and_detached() -> None:
    parameters = {"feedRate": 100.0, "refluxRatio": 3.0, "numberOfPlates": 20.0}
    results = simulate("distillation", parameters)
    frame = build_visual_frame("distillation", parameters, results)

    assert frame["process"] == "distillation"
    assert frame["parameters"] == parameters
    assert isinstance(frame["results"]["temperatures"], list)
    assert frame["results"]["numberOfTheoreticalStages"] == 14

    frame["results"]["temperature"] = 350.0
    assert "temperature" not in results


def test_build_visual_frame_replaces_non_finite_values() -> None:
    frame = build_visual_frame(
        "filtration",
        {"particleSize": float("nan")},
        {"filtrationRate": float("inf"), "profile": [1.0, float("nan")]},
    )

    assert frame["parameters"]["particleSize"] == 0.0
    assert frame["results"]["filtrationRate"] == 0.0
    assert frame["results"]["profile"] == [1.0, 0.0]


def test_fermentation_trajectory_ends_at_model_result() -> None:
    parameters = {"temperature": 30, "pH": 6.5, "sugarConcentration": 15, "time": 48}
    trajectory = simulate_over_time("fermentation", parameters)
    frames = list(trajectory)

    assert len(trajectory) == step_count(48.0) + 1
    assert len(frames) == len(trajectory)
    assert frames[0]["time"] == 0.0
    assert trajectory.final()["substrateRemaining"] == pytest.approx(
        simulate("fermentation", parameters)["substrateRemaining"]
    )
    remaining = [frame["substrateRemaining"] for frame in frames]
    assert all(later <= earlier for earlier, later in zip(remaining, remaining[1:]))


def test_trajectory_is_restartable_and_snapshots_are_fresh() -> None:
    parameters = {"temperature": 25, "concentration": 75, "coolingRate": 2}
    trajectory = simulate_over_time("crystallization", parameters, 5.0, seed=3)

    first = list(trajectory)
    first[-1]["renderedParticles"] = 120
    second = list(trajectory)

    assert len(first) == len(trajectory)
    assert "renderedParticles" not in second[-1]
    assert [frame["crystalCount"] for frame in first] == [
        frame["crystalCount"] for frame in second
    ]
    assert second == list(trajectory)


def test_trajectory_to_frame_has_one_row_per_snapshot() -> None:
    trajectory = simulate_over_time(
        "fermentation",
        {"temperature": 30, "pH": 6.5, "sugarConcentration": 15, "time": 48},
        duration=2.0,
    )
    frame = trajectory.to_frame()

    assert len(frame) == len(trajectory)
    assert {"time", "biomassConcentration", "substrateRemaining", "alcoholContent"} == set(
        frame.columns
    )


def test_crystallization_trajectory_uses_configured_seed(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "procsim.engine.simulator.get_settings",
        lambda: Settings(random_seed=9, crystallization_dt=0.5),
    )
    parameters = {"temperature": 25, "concentration": 75, "coolingRate": 2}

    first = simulate_over_time("crystallization", parameters, 10.0)
    second = simulate_over_time("crystallization", parameters, 10.0)

    assert len(first) == 21
    assert list(first) == list(second)


def test_trajectory_rejects_unsupported_requests() -> None:
    fermentation = {"temperature": 30, "pH": 6.5, "sugarConcentration": 15, "time": 48}

    with pytest.raises(UnknownProcessError):
        simulate_over_time("reactorDesign", {})
    with pytest.raises(InvalidParameterError):
        simulate_over_time("fermentation", fermentation, dt=0.5)
    with pytest.raises(InvalidParameterError):
        simulate_over_time("fermentation", fermentation, duration=-1.0)
    with pytest.raises(InvalidParameterError):
        simulate_over_time(
            "crystallization", {"temperature": 25, "coolingRate": 2}, liquid="mercury"
        )


@pytest.mark.parametrize(("duration", "dt"), [(0.3, 0.1), (0.7, 0.1), (2.1, 0.3)])
def test_crystallization_trajectory_length_matches_frames(duration: float, dt: float) -> None:
    trajectory = simulate_over_time(
        "crystallization", {"temperature": 25, "coolingRate": 2}, duration, dt=dt, seed=1
    )

    assert len(trajectory) == round(duration / dt) + 1
    assert len(list(trajectory)) == len(trajectory)


def test_crystallization_trajectory_defaults_temperature() -> None:
    trajectory = simulate_over_time("crystallization", {"coolingRate": 2}, 1.0, seed=1)

    assert next(iter(trajectory))["temperature"] == DEFAULT_STEPPED_TEMPERATURE_K
    temperatures = [frame["temperature"] for frame in trajectory]
    assert all(later <= earlier for earlier, later in zip(temperatures, temperatures[1:]))
