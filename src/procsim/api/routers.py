from __future__ import annotations

from fastapi import APIRouter

from procsim.engine import simulate, simulate_clamped, simulate_over_time
from procsim.registry import (
    STOCHASTIC_PROCESSES,
    default_version,
    get_model,
    get_schema,
    list_processes,
    model_versions,
)

from . import schemas

router = APIRouter()


@router.get("/processes", response_model=list[schemas.ProcessInfo])
def list_process_info():
    return [
        schemas.ProcessInfo(
            process=kind.value,
            versions=list(model_versions(kind)),
            defaultVersion=default_version(kind),
            stochastic=kind in STOCHASTIC_PROCESSES,
        )
        for kind in list_processes()
    ]


@router.get("/processes/{process}/schema", response_model=list[schemas.ParameterRead])
def read_schema(process: str):
    return get_schema(process).to_list()


@router.post("/simulate", response_model=schemas.SimulateResponse)
def run_simulation(payload: schemas.SimulateRequest):
    model = get_model(payload.process, payload.version)
    if payload.clamp:
        results = simulate_clamped(model.kind, payload.parameters, version=model.version)
    else:
        results = simulate(model.kind, payload.parameters, version=model.version)
    return schemas.SimulateResponse(
        process=model.kind.value, version=model.version, results=results
    )


@router.post("/trajectory", response_model=schemas.TrajectoryResponse)
def run_trajectory(payload: schemas.TrajectoryRequest):
    trajectory = simulate_over_time(
        payload.process,
        payload.parameters,
        payload.duration,
        dt=payload.dt,
        seed=payload.seed,
        liquid=payload.liquid,
        habit=payload.habit,
    )
    return schemas.TrajectoryResponse(process=trajectory.process, frames=list(trajectory))
