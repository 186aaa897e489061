from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class ProcessInfo(BaseModel):
    process: str
    versions: list[str]
    defaultVersion: str
    stochastic: bool


class ParameterRead(BaseModel):
    name: str
    min: float
    max: float
    step: float
    default: float
    unit: str = ""
    required: bool = True


class SimulateRequest(BaseModel):
    process: str
    parameters: dict[str, Any] = Field(default_factory=dict)
    version: Optional[str] = None
    clamp: bool = True


class SimulateResponse(BaseModel):
    process: str
    version: str
    results: dict[str, Any]


class TrajectoryRequest(BaseModel):
    process: str
    parameters: dict[str, Any] = Field(default_factory=dict)
    duration: Optional[float] = Field(default=None, ge=0)
    dt: Optional[float] = Field(default=None, gt=0)
    seed: Optional[int] = None
    liquid: str = "water"
    habit: str = "cubic"


class TrajectoryResponse(BaseModel):
    process: str
    frames: list[dict[str, Any]]


class ErrorResponse(BaseModel):
    error: str
    detail: str
