from __future__ import annotations

import argparse
import json
from typing import List, Optional

from horti_engine.core.pipeline import run_design
from horti_engine.logging_config import get_logger
from horti_engine.scenarios import design_summary, load_scenario, save_scenario
from horti_engine.scripts import smoke_pipeline

logger = get_logger(__name__)


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        prog="horti-smoke",
        description="Run reference lighting design scenarios.",
    )
    parser.add_argument(
        "scenario",
        nargs="?",
        default="boundary_cone",
        choices=list(smoke_pipeline.SCENARIOS.keys()),
        help="Scenario to run (default: boundary_cone)",
    )
    parser.add_argument(
        "--save",
        help="Optional path to save the scenario JSON after running.",
    )
    parser.add_argument(
        "--load",
        help="Load a facility spec from a scenario JSON and run it instead.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the design summary as JSON instead of the text report.",
    )
    args = parser.parse_args(argv)

    if args.load:
        logger.info("Loading scenario from %s", args.load)
        try:
            data = load_scenario(args.load)
            spec = data["facility_spec"]
            if spec is None:
                raise ValueError(f"Scenario {args.load} has no facility spec")
            outputs = {"spec": spec, "result": run_design(spec)}
            _report(spec.name, outputs, args.json)
            logger.info("Scenario %s loaded", args.load)
        except Exception:
            logger.exception("Failed to load scenario %s", args.load)
            raise
        return

    logger.info("Starting horti-smoke scenario=%s", args.scenario)
    try:
        outputs = smoke_pipeline.run_named_scenario(args.scenario, summarize=False)
        _report(args.scenario, outputs, args.json)
        if args.save:
            destination = save_scenario(args.save, outputs["spec"], outputs["result"])
            logger.info("Scenario saved to %s", destination)
        logger.info("Scenario %s completed", args.scenario)
    except Exception:
        logger.exception("Scenario %s failed", args.scenario)
        raise


def _report(label: str, outputs: dict, as_json: bool) -> None:
    if as_json:
        print(json.dumps(design_summary(outputs["result"]), indent=2))
    else:
        smoke_pipeline.summarize_outputs(label, outputs)


if __name__ == "__main__":
    main()
