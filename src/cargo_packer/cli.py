from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from cargo_packer.config import load_settings
from cargo_packer.io.schemas import PackRequestSchema
from cargo_packer.planning import build_plan

logger = logging.getLogger(__name__)


def load_input(path: Path, preset: Optional[str] = None) -> PackRequestSchema:
    """Read a pack request JSON file; --preset fills in container_preset when given."""
    data = json.loads(path.read_text(encoding="utf-8"))
    if preset:
        data["container_preset"] = preset
    return PackRequestSchema.model_validate(data)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Cargo packer CLI")
    parser.add_argument("--input", required=True, help="Input request JSON file")
    parser.add_argument("--output", required=True, help="Output plan JSON file")
    parser.add_argument("--preset", help="Container preset (e.g. VAN, 20, 40HC); overrides the input file")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )

    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        request = load_input(Path(args.input), args.preset)
        plan = build_plan(request, settings=load_settings())
    except (ValidationError, ValueError) as e:
        logger.error(f"Invalid input: {e}")
        return 2

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(plan.model_dump(mode="json"), f, indent=2)

    print(f"Packed   : {plan.packed_count}/{plan.requested_count}")
    print(f"Unplaced : {', '.join(plan.unplaced) if plan.unplaced else '(none)'}")
    print(f"Plan written to {output_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
