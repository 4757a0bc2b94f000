"""CLI for replaying dispatch scenarios defined in JSON configs."""
from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Dict, List, Optional

from simulation import Dispatcher, FleetConfig, InvalidFloorError

logger = logging.getLogger("run_scenario")

MOVEMENT_TIMEOUT = 10.0


def build_dispatcher(config: Dict) -> Dispatcher:
    fleet_cfg = config.get("fleet", {})
    return Dispatcher(FleetConfig.from_dict(fleet_cfg))


def run_steps(dispatcher: Dispatcher, steps: List[Dict]) -> List[Dict]:
    """Apply each step in order and return the event log.

    The log holds every event delivered to the dispatcher's sinks, plus an
    ``invalid_floor`` entry for each rejected request.
    """

    log: List[Dict] = []
    dispatcher.on_event(lambda event: log.append(asdict(event)))

    for step in steps:
        if "request" in step:
            try:
                dispatcher.submit_request(step["request"])
            except InvalidFloorError as exc:
                logger.warning("%s", exc)
                log.append({"kind": "invalid_floor", "floor": exc.floor, "message": str(exc)})
        elif step.get("dispatch"):
            dispatcher.dispatch_pending()
            if not dispatcher.wait_for_movements(timeout=MOVEMENT_TIMEOUT):
                logger.warning("Movements still running after %.1fs", MOVEMENT_TIMEOUT)
        elif step.get("reset"):
            dispatcher.reset()
        else:
            raise ValueError(f"Unrecognised scenario step: {step!r}")
    return log


def save_results(output_path: Optional[Path], data: Dict) -> None:
    if not output_path:
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(data, indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("config", type=Path, help="Path to a JSON scenario configuration file")
    parser.add_argument(
        "--output",
        type=Path,
        help="Optional file path to write the event log and final state as JSON",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = json.loads(args.config.read_text())
    with build_dispatcher(config) as dispatcher:
        events = run_steps(dispatcher, config.get("steps", []))
        statuses = [asdict(status) for status in dispatcher.statuses()]
        results = {
            "scenario": config.get("name", args.config.stem),
            "description": config.get("description"),
            "fleet": asdict(dispatcher.config),
            "dispatched": dispatcher.dispatched_count,
            "events": events,
            "final_state": statuses,
        }

    save_results(args.output, results)

    print(f"Scenario: {results['scenario']}")
    if results["description"]:
        print(results["description"])
    print("Events:")
    for event in events:
        details = ", ".join(f"{k}={v}" for k, v in event.items() if k != "kind")
        print(f"  {event['kind']}: {details}")
    print("Final state:")
    for status in statuses:
        print(
            f"  Elevator {status['elevator_id']} Floor: {status['floor']} "
            f"(Load: {status['load']}/{status['capacity']})"
        )
    if args.output:
        print(f"Saved results to {args.output}")


if __name__ == "__main__":
    main()
