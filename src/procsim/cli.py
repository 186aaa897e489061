from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Sequence

from procsim.config import get_settings
from procsim.engine import simulate, simulate_clamped, simulate_over_time
from procsim.errors import ProcessSimulationError
from procsim.logging_config import setup_logging
from procsim.models.crystallization import CRYSTAL_HABITS, LIQUIDS
from procsim.registry import (
    STOCHASTIC_PROCESSES,
    default_version,
    get_schema,
    list_processes,
    model_versions,
)

logger = logging.getLogger(__name__)


def _parse_assignment(text: str) -> tuple[str, object]:
    name, sep, raw = text.partition("=")
    if not sep or not name:
        msg = f"expected NAME=VALUE, got {text!r}"
        raise argparse.ArgumentTypeError(msg)
    try:
        return name.strip(), float(raw)
    except ValueError:
        return name.strip(), raw


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="procsim", description="Unit-operation process simulator"
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default from settings)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("processes", help="List process kinds and their model variants")

    p_schema = sub.add_parser("schema", help="Print the parameter schema of a process as JSON")
    p_schema.add_argument("process")

    p_sim = sub.add_parser("simulate", help="Run one simulation and print the results as JSON")
    p_sim.add_argument("process")
    p_sim.add_argument("--set", dest="assignments", action="append", type=_parse_assignment,
                       default=[], metavar="NAME=VALUE", help="Override a schema default")
    p_sim.add_argument("--version", default=None, help="Model variant (default per process)")
    p_sim.add_argument("--no-clamp", dest="clamp", action="store_false",
                       help="Pass values to the model without clamping to the schema ranges")

    p_traj = sub.add_parser("trajectory", help="Step a time-dependent model and print its frames")
    p_traj.add_argument("process")
    p_traj.add_argument("--set", dest="assignments", action="append", type=_parse_assignment,
                        default=[], metavar="NAME=VALUE", help="Override a schema default")
    p_traj.add_argument("--duration", type=float, default=None)
    p_traj.add_argument("--dt", type=float, default=None)
    p_traj.add_argument("--seed", type=int, default=None)
    p_traj.add_argument("--liquid", choices=sorted(LIQUIDS), default="water")
    p_traj.add_argument("--habit", choices=sorted(CRYSTAL_HABITS), default="cubic")
    p_traj.add_argument("--csv", type=str, default=None, help="Write frames to this CSV file")

    return parser


def _parameters(process: str, assignments: list[tuple[str, object]]) -> dict[str, object]:
    parameters: dict[str, object] = dict(get_schema(process).defaults())
    parameters.update(assignments)
    return parameters


def _run(args: argparse.Namespace) -> None:
    if args.cmd == "processes":
        for kind in list_processes():
            flag = " (stochastic trajectory)" if kind in STOCHASTIC_PROCESSES else ""
            versions = ", ".join(
                f"{version}*" if version == default_version(kind) else version
                for version in model_versions(kind)
            )
            print(f"{kind.value}: {versions}{flag}")
        return

    if args.cmd == "schema":
        print(json.dumps(get_schema(args.process).to_list(), indent=2))
        return

    parameters = _parameters(args.process, args.assignments)

    if args.cmd == "simulate":
        if args.clamp:
            results = simulate_clamped(args.process, parameters, version=args.version)
        else:
            results = simulate(args.process, parameters, version=args.version)
        print(json.dumps(results, indent=2))
        return

    trajectory = simulate_over_time(
        args.process,
        parameters,
        args.duration,
        dt=args.dt,
        seed=args.seed,
        liquid=args.liquid,
        habit=args.habit,
    )
    if args.csv:
        frame = trajectory.to_frame()
        frame.to_csv(args.csv, index=False)
        logger.info("Wrote %d frames to %s", len(frame), args.csv)
        return
    print(json.dumps(list(trajectory), indent=2))


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    setup_logging(args.log_level or get_settings().log_level)
    try:
        _run(args)
    except ProcessSimulationError as exc:
        logger.warning("%s failed: %s", args.cmd, exc)
        raise SystemExit(f"error: {exc}") from exc
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
