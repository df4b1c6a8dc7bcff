#!/usr/bin/env python3
"""
Inspect a G-code file.

Fetch a G-code source (file or URL), parse it and print a layer summary.

Usage:
    gcode-layers part.gcode
    gcode-layers part.gcode --layers
    gcode-layers https://printer.local/files/part.gcode --config viewer.yaml
    gcode-layers part.gcode --json > summary.json
"""

from __future__ import annotations

import argparse
import json
import sys

from gcode_layers import geometry
from gcode_layers.configs import ConfigError, load_config
from gcode_layers.interpreter import GCodeParser, ParseResult
from gcode_layers.loader import GCodeLoader, LoadError
from gcode_layers.utils.logging_config import get_logger, push_context, setup_logging

logger = get_logger(__name__)


def summarize(result: ParseResult, include_layers: bool = False) -> dict:
    """Build a JSON-serializable summary of a parse."""
    box = geometry.bounds(result)
    stats = result.stats
    summary = {
        "layers": len(result.layers),
        "segments": sum(layer.segment_count for layer in result.layers),
        "extruded_length_mm": round(geometry.extruded_length(result), 3),
        "bounds": None if box is None else {
            "min": [round(float(v), 3) for v in box[0]],
            "max": [round(float(v), 3) for v in box[1]],
        },
        "lines": stats.lines,
        "motion_commands": stats.motion_commands,
        "arc_commands": stats.arc_commands,
        "ignored_commands": dict(stats.ignored_commands),
        "malformed_parameters": stats.malformed_parameters,
    }
    if include_layers:
        summary["layer_table"] = [
            {
                "index": i,
                "z": layer.z,
                "start_line": layer.start_line,
                "paths": sum(1 for p in layer.paths if p),
                "segments": layer.segment_count,
            }
            for i, layer in enumerate(result.layers)
        ]
    return summary


def _print_summary(summary: dict) -> None:
    print(f"Layers:          {summary['layers']}")
    print(f"Segments:        {summary['segments']}")
    print(f"Extruded length: {summary['extruded_length_mm']:.3f} mm")
    if summary["bounds"] is not None:
        lo, hi = summary["bounds"]["min"], summary["bounds"]["max"]
        print(f"Bounds:          {lo} .. {hi}")
    print(f"Lines:           {summary['lines']}")
    if summary["arc_commands"]:
        print(f"Arcs skipped:    {summary['arc_commands']}")

    for row in summary.get("layer_table", []):
        print(
            f"  layer {row['index']:4d}  z={row['z']:<8g} line {row['start_line'] + 1:<8d}"
            f" paths={row['paths']:<4d} segments={row['segments']}"
        )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Parse a G-code file and summarize its layers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("source", type=str, help="G-code file path or http(s) URL")
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        help="Configuration file path (default: packaged default.yaml)",
    )
    parser.add_argument(
        "--layers",
        "-l",
        action="store_true",
        help="Print one row per layer",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the summary as JSON",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the configured log level",
    )

    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ConfigError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    log_cfg = config.logging
    setup_logging(
        args.log_level or log_cfg.level,
        log_cfg.file,
        json=log_cfg.json_lines,
        color=log_cfg.color,
    )
    push_context(source=args.source)

    gcode_parser = GCodeParser(instrument=config.parser.instrument)
    with GCodeLoader.from_config(config.loader, parser=gcode_parser) as loader:
        try:
            result = loader.load(args.source)
        except LoadError as e:
            logger.error(str(e))
            return 1

    summary = summarize(result, include_layers=args.layers)
    if args.json:
        print(json.dumps(summary, indent=2))
    else:
        _print_summary(summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
