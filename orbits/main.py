# orbits/main.py
import argparse
import json
import logging
import math
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional

from orbits.config import settings
from orbits.config.settings import DEFAULT_RUN_DAYS, OUTPUT_DIR, clamp_tick, validate_settings
from orbits.physics.errors import PhysicsError, UnknownBodyError
from orbits.simulation.registry import SolarSystem, build_default_system

# --- Setup logger ------------------------------------------------------------
log = logging.getLogger("main")


def save_json(obj: Any, name_prefix: str, out_dir: Optional[str] = None) -> str:
    ts = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    out = Path(out_dir or OUTPUT_DIR)
    out.mkdir(parents=True, exist_ok=True)
    filename = out / f"{name_prefix}_{ts}.json"
    with open(filename, "w") as f:
        json.dump(obj, f, indent=2)
    return str(filename)


def run(system: SolarSystem, days: float, step: float) -> List[dict]:
    """
    Tick the system until `days` have elapsed and return one snapshot dict
    per tick (the initial state included).
    """
    history = [system.positions().to_dict()]
    n_ticks = max(0, math.ceil(days / step - 1e-9))
    for k in range(n_ticks):
        dt = min(step, days - k * step)
        system.tick(dt)
        snap = system.positions()
        history.append(snap.to_dict())
        for name, c in zip(snap.names, snap.coordinates):
            log.debug("JD %.2f  %-10s  [%.6f, %.6f, %.6f]", snap.time, name, *c)
    return history


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Propagate the default star system and dump positions.")
    p.add_argument("--days", type=float, default=DEFAULT_RUN_DAYS, help="simulated span in days")
    p.add_argument("--step", type=float, default=None, help="tick length in days")
    p.add_argument("--output", default=None, help="output directory for the JSON snapshot")
    p.add_argument("--history", action="store_true", help="write every tick, not just the last one")
    p.add_argument("--verbose", "-v", action="store_true")
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s  %(levelname)-7s  %(message)s",
        datefmt="%H:%M:%S"
    )

    try:
        validate_settings()
        if not math.isfinite(args.days):
            raise ValueError(f"--days must be finite (got {args.days})")
        step = clamp_tick(args.step)
        system = build_default_system()
        log.info("Starting run: %d bodies, %.1f days in ticks of %.3g days (RK4 step %.3g)",
                 len(system), args.days, step, settings.RK4_STEP)

        history = run(system, args.days, step)

        payload = history if args.history else history[-1]
        path = save_json(payload, settings.RUN_ID_PREFIX, args.output)
        log.info("Final JD %.2f; wrote %s", system.time, path)
    except (PhysicsError, UnknownBodyError, ValueError) as e:
        log.exception("Run failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
