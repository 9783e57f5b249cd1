"""Command line entrypoint for planning responsive image widths and queries.

Examples:
  python -m cli.plan_sizes "(min-width: 680px) 400px, 100vw" --width 2400 --height 1600 --json
  python -m cli.plan_sizes "100vw" --devices devices.json --metadata assets.json --selector .hero
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from pydantic import TypeAdapter, ValidationError

from config import settings
from config.options import PlannerConfig
from domain.models import DeviceDefinition, ImageAsset, Metadata
from parsing.errors import PlannerError
from planning.device_sizes import DeviceSizes
from services import pipeline

_DEVICES = TypeAdapter(list[DeviceDefinition])
_METADATA = TypeAdapter(dict[str, list[ImageAsset]])
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Plan image widths and media queries for a sizes attribute")
    p.add_argument("sizes", nargs="?", default=settings.DEFAULT_SIZES, help="sizes attribute value")
    p.add_argument("--devices", type=str, help="JSON file with a list of device definitions")
    p.add_argument("--scaling-factor", type=float, help="Override the scaling factor (0 disables filtering)")
    p.add_argument("--width", type=int, help="Source image width in pixels")
    p.add_argument("--height", type=int, help="Source image height in pixels")
    p.add_argument("--metadata", type=str, help="JSON file mapping formats to generated image records")
    p.add_argument("--selector", type=str, default=".image", help="CSS selector for background rules")
    p.add_argument(
        "--orientation",
        action="append",
        dest="orientations",
        help="Orientation to emit queries for (repeatable; default both)",
    )
    p.add_argument("--json", action="store_true", help="Output JSON summary")
    p.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=settings.LOG_LEVEL.upper(),
        help="Logging level",
    )
    return p.parse_args(argv)


def _load_json(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as fh:
        return json.load(fh)


def build_config(args: argparse.Namespace) -> PlannerConfig:
    devices = _DEVICES.validate_python(_load_json(args.devices)) if args.devices else None
    return PlannerConfig.build(devices=devices, scaling_factor=args.scaling_factor)


def queries_summary(args: argparse.Namespace, config: PlannerConfig, metadata: Metadata) -> dict:
    plan = DeviceSizes(args.sizes, config.devices)
    queries = plan.to_media_queries(metadata, args.orientations or settings.DEFAULT_ORIENTATIONS)
    return {
        "queries": len(queries),
        "css": queries.to_css(args.selector),
        "sources": [{"media": s.media, "srcset": s.srcset, "type": s.type} for s in queries.to_sources()],
    }


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")
    try:
        config = build_config(args)
        result = pipeline.plan_summary(args.sizes, config, width=args.width, height=args.height)
        if args.metadata:
            metadata = _METADATA.validate_python(_load_json(args.metadata))
            result.update(queries_summary(args, config, metadata))
    except (PlannerError, ValidationError, OSError, json.JSONDecodeError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    if args.json:
        print(json.dumps(result, indent=2))
    else:
        print(f"Sizes plan for {result['sizes']!r}:")
        for k, v in result.items():
            if k in ("sizes", "targets", "css", "sources"):
                continue
            print(f"  {k}: {v}")
        if "css" in result:
            print(result["css"])
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
