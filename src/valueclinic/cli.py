#!/usr/bin/env python3
"""
CLI entrypoint for valueclinic

    valueclinic --chart ./mychart [--values values.yaml] [--dev-values values-dev.yaml]

Prints every declared value that no template references. Settings may also
come from valueclinic.yaml or [tool.valueclinic] in pyproject.toml; flags win.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import graphviz

from .chart_loader import ChartError
from .config_loader import ValueClinicConfig, load_config, save_example_config
from .unused_values import ChartAnalysis, analyze_chart, save_unused_report


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="valueclinic", description="Report values.yaml entries no chart template references"
    )
    parser.add_argument("--chart", default=None, help="Path to the Helm chart directory")
    parser.add_argument("--values", default=None, help="Path to the values.yaml file (default: values.yaml)")
    parser.add_argument(
        "--dev-values",
        action="append",
        default=None,
        help="Override values file merged over --values (optional, repeatable)",
    )
    parser.add_argument("--config", default=None, help="Path to config file (YAML or pyproject.toml)")
    parser.add_argument("--white-list", action="append", default=None, help="Value path pattern never reported")
    parser.add_argument("--output", default=None, help="Write unused_values.json to this directory")
    parser.add_argument("--graph", action="store_true", help="Also render the values tree (needs --output or config)")
    parser.add_argument("--format", default=None, help="Graph image format (svg, png, ...)")
    parser.add_argument("--fail-on-unused", action="store_true", help="Exit 1 when unused values are found")
    parser.add_argument("--init", action="store_true", help="Write an example valueclinic.yaml and exit")
    parser.add_argument("--force", action="store_true", help="Overwrite an existing config with --init")
    parser.add_argument("--show-config", action="store_true", help="Print the effective configuration and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging to stderr")
    return parser


def _merge_args(cfg: ValueClinicConfig, args: argparse.Namespace) -> ValueClinicConfig:
    if args.chart:
        cfg.chart = args.chart
    if args.values:
        cfg.values = args.values
    if args.dev_values:
        cfg.dev_values = list(args.dev_values)
    if args.white_list:
        cfg.white_list = cfg.white_list + list(args.white_list)
    if args.output:
        cfg.output = args.output
    if args.format:
        cfg.format = args.format
    if args.fail_on_unused:
        cfg.fail_on_unused = True
    return cfg


def _show_config(cfg: ValueClinicConfig) -> None:
    print("Effective configuration:")
    print(f"  chart:          {cfg.chart or '(not set)'}")
    print(f"  values:         {cfg.values}")
    print(f"  dev_values:     {', '.join(cfg.dev_values) or '(none)'}")
    print(f"  prefix:         {cfg.prefix}")
    print(f"  white_list:     {', '.join(cfg.white_list) or '(none)'}")
    print(f"  output:         {cfg.output}")
    print(f"  format:         {cfg.format}")
    print(f"  fail_on_unused: {cfg.fail_on_unused}")


def print_unused(analysis: ChartAnalysis) -> None:
    if not analysis.unused:
        print("No unused values found.")
    else:
        print("Unused values in values.yaml:")
        for value in analysis.unused:
            print(value)
    if analysis.ignored:
        print(f"({len(analysis.ignored)} unused values ignored by white_list)")


def _write_artifacts(analysis: ChartAnalysis, cfg: ValueClinicConfig, graph: bool) -> None:
    out_dir = Path(cfg.output)
    report = save_unused_report(analysis, out_dir)
    print(f"Report written to {report}", file=sys.stderr)
    if not graph:
        return
    from .graphviz_render import render_values_tree

    tree_dir = out_dir / "tree"
    tree_dir.mkdir(parents=True, exist_ok=True)
    dot_path, image_path = render_values_tree(
        analysis.values_tree, analysis.used_tree, str(tree_dir / "values_tree"), cfg.format, cfg.prefix
    )
    if image_path:
        print(f"Values tree rendered to {image_path}", file=sys.stderr)
    else:
        print(f"Graphviz 'dot' not found; wrote {dot_path} only", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.init:
        target = Path("valueclinic.yaml")
        if target.exists() and not args.force:
            print(f"config file already exists: {target} (use --force to overwrite)", file=sys.stderr)
            sys.exit(1)
        print(f"Config written to {save_example_config(target)}")
        return

    try:
        cfg = load_config(Path(args.config) if args.config else None)
    except (OSError, ValueError) as e:
        print(f"error while reading config: {e}", file=sys.stderr)
        sys.exit(1)
    cfg = _merge_args(cfg, args)

    if args.show_config:
        _show_config(cfg)
        return

    if not cfg.chart:
        parser.print_usage(sys.stderr)
        print("valueclinic: error: --chart is required", file=sys.stderr)
        sys.exit(2)

    if args.graph and cfg.format not in graphviz.FORMATS:
        print(f"valueclinic: error: unknown graph format: {cfg.format!r}", file=sys.stderr)
        sys.exit(2)

    try:
        analysis = analyze_chart(
            cfg.chart,
            values=cfg.values,
            dev_values=cfg.dev_values,
            prefix=cfg.prefix,
            white_list=cfg.white_list,
        )
    except ChartError as e:
        print(f"error while reading chart: {e}", file=sys.stderr)
        sys.exit(1)

    print_unused(analysis)

    if args.output or args.graph:
        try:
            _write_artifacts(analysis, cfg, args.graph)
        except (OSError, ValueError, graphviz.CalledProcessError) as e:
            print(f"error while writing report: {e}", file=sys.stderr)
            sys.exit(1)

    if cfg.fail_on_unused and analysis.unused:
        sys.exit(1)


if __name__ == "__main__":
    main()
