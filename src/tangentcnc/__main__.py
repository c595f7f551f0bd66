"""CLI entry point: ``python -m tangentcnc generate points.json -o out.nc``"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .config.machine import AngleMode, MachineConfig
from .config.settings import AppSettings
from .core.geometry import as_points
from .core.job import Job
from .core.playback import build_path, clamp_distance, position_at_distance
from .core.units import Units
from .gcode.generator import default_filename
from .gcode.parser import parse_with_heading
from .gcode.validate import MachineEnvelope, validate_config, validate_samples


def _add_machine_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--units", choices=[u.value for u in Units], default=None,
                   help="Output units (default: from settings)")
    p.add_argument("--scale", type=float, default=None,
                   help="Canvas units to machine units (default: from settings)")
    p.add_argument("--tool-offset", type=float, nargs=2, default=None,
                   metavar=("DX", "DY"), help="XY tool offset in machine units")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="tangentcnc",
        description="Generate and read tangential-knife G-code (.nc).",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    g = sub.add_parser("generate", help="Sketch JSON -> G-code")
    g.add_argument("input", type=Path,
                   help="JSON list of control points ([x, y] or {\"x\", \"y\"})")
    g.add_argument("-o", "--output", type=Path, default=None,
                   help="Output .nc file (default: timestamped name)")
    g.add_argument("--oriented", action="store_true",
                   help="Emit C-axis headings")
    g.add_argument("--resolution", type=int, default=None,
                   help="Samples per curve span (default: from settings)")
    g.add_argument("--safe-height", type=float, default=None)
    g.add_argument("--cut-depth", type=float, default=None)
    g.add_argument("--feed", type=float, default=None, help="G1 feed rate")
    g.add_argument("--rapid", type=float, default=None, help="Rapid feed rate")
    g.add_argument("--angle-mode", choices=[m.value for m in AngleMode], default=None)
    g.add_argument("--angle-offset", type=float, default=None)
    g.add_argument("--no-shortest-path", action="store_true",
                   help="Disable shortest-rotation heading continuity")
    g.add_argument("--skip-validate", action="store_true",
                   help="Skip config / travel validation")
    _add_machine_args(g)

    r = sub.add_parser("parse", help="G-code -> points")
    r.add_argument("input", type=Path)
    r.add_argument("--headings", action="store_true", help="Include C headings")
    r.add_argument("--machine-frame", action="store_true",
                   help="Print machine coordinates instead of canvas coordinates")
    _add_machine_args(r)

    v = sub.add_parser("preview", help="Position along a program at a distance")
    v.add_argument("input", type=Path)
    v.add_argument("--distance", type=float, required=True,
                   help="Distance along the path (canvas units)")
    _add_machine_args(v)

    return p


def _machine_config(args: argparse.Namespace, settings: AppSettings) -> MachineConfig:
    cfg = settings.machine_config()
    changes = {}
    if args.units is not None:
        changes["units"] = Units(args.units)
    if args.scale is not None:
        changes["scale_factor"] = args.scale
    if args.tool_offset is not None:
        changes["tool_offset_x"], changes["tool_offset_y"] = args.tool_offset

    overrides = {
        "safe_height": "safe_height",
        "cut_depth": "cut_depth",
        "feed": "feed_rate",
        "rapid": "rapid_rate",
        "angle_offset": "angle_offset",
    }
    for arg_name, field_name in overrides.items():
        value = getattr(args, arg_name, None)
        if value is not None:
            changes[field_name] = value
    if getattr(args, "angle_mode", None) is not None:
        changes["angle_mode"] = AngleMode(args.angle_mode)
    if getattr(args, "no_shortest_path", False):
        changes["shortest_path"] = False

    return cfg.replace(**changes)


def _cmd_generate(args: argparse.Namespace, settings: AppSettings) -> int:
    cfg = _machine_config(args, settings)
    points = as_points(json.loads(args.input.read_text()))
    job = Job(points=points, resolution=args.resolution or settings.resolution, config=cfg)

    print(f"Loaded {len(points)} control points from {args.input}")
    polyline = job.polyline()
    if not polyline:
        print("Error: no control points to generate from", file=sys.stderr)
        return 1

    if not args.skip_validate:
        result = validate_config(cfg).merge(
            validate_samples(polyline, cfg, MachineEnvelope())
        )
        if result.has_errors:
            print("VALIDATION ERRORS:", file=sys.stderr)
            for issue in result.issues:
                if issue.severity == "error":
                    print(f"  ERROR: {issue.message}", file=sys.stderr)
            return 1
        for issue in result.issues:
            if issue.severity == "warning":
                print(f"  Warning: {issue.message}")

    text = job.oriented_program() if args.oriented else job.positional_program()
    output: Path = args.output or Path(default_filename(oriented=args.oriented))
    output.write_text(text + "\n")
    print(f"  {len(polyline)} samples, units {cfg.units.label()}")
    print(f"Wrote {output}")
    return 0


def _cmd_parse(args: argparse.Namespace, settings: AppSettings) -> int:
    cfg = _machine_config(args, settings)
    samples = parse_with_heading(args.input.read_text(), cfg,
                                 to_canvas=not args.machine_frame)
    if not samples:
        print("No XY moves found in the selected G-code.", file=sys.stderr)
        return 1
    for s in samples:
        if args.headings:
            heading = "-" if s.heading is None else f"{s.heading:.3f}"
            print(f"{s.x:.3f}\t{s.y:.3f}\t{heading}")
        else:
            print(f"{s.x:.3f}\t{s.y:.3f}")
    return 0


def _cmd_preview(args: argparse.Namespace, settings: AppSettings) -> int:
    cfg = _machine_config(args, settings)
    path = build_path(parse_with_heading(args.input.read_text(), cfg))
    pos = position_at_distance(path, clamp_distance(path, args.distance))
    if pos is None:
        print("No XY moves found in the selected G-code.", file=sys.stderr)
        return 1
    heading = "-" if pos.heading is None else f"{pos.heading:.3f}"
    print(f"length={path.total_length:.3f} x={pos.x:.3f} y={pos.y:.3f} "
          f"heading={heading} delta={pos.heading_delta:.3f}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    settings = AppSettings.load()
    commands = {
        "generate": _cmd_generate,
        "parse": _cmd_parse,
        "preview": _cmd_preview,
    }
    return commands[args.command](args, settings)


if __name__ == "__main__":
    sys.exit(main())
