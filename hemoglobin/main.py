#!/usr/bin/env python3
"""CLI for hemoglobin."""

import argparse
import logging
import sys
import time
from pathlib import Path

import numpy as np

from .automaton import CODE_BITS, Rule
from .canvas import TextCanvas
from .config import DEFAULT_DENSITY, SimulationConfig
from .grid import load_pattern
from .metrics import evaluate_rule
from .neighborhood import decode_state
from .visualize import visualize_rule
from .world import World


def load_rule(args) -> Rule:
    """Build the rule named on the command line, exiting on bad input."""
    try:
        if args.life:
            return Rule.from_life_like(args.rule)
        return Rule.from_code(args.rule)
    except ValueError as e:
        print(f"Error parsing rule '{args.rule}': {e}")
        sys.exit(1)


def build_config(args) -> SimulationConfig:
    try:
        return SimulationConfig(
            width=args.width,
            height=args.height,
            steps=args.steps,
            density=args.density,
            seed=args.seed,
        )
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)


def cmd_run(args):
    """Simulate a rule and print each generation as text."""
    rule = load_rule(args)
    config = build_config(args)

    world = World(config.width, config.height, rule)
    if args.pattern:
        world.load(load_pattern(args.pattern), x=args.offset_x, y=args.offset_y)
    else:
        world.randomize(rng=np.random.default_rng(config.seed), density=config.density)

    canvas = TextCanvas(config.width, config.height)
    for _ in range(config.steps + 1):
        world.render(canvas)
        print(canvas.to_text())
        print(f"-- generation {world.generation}, population {world.population()}")
        if world.generation == config.steps:
            break
        if args.delay:
            time.sleep(args.delay)
        world.step()


def cmd_visualize(args):
    """Render a rule to a GIF and PNG snapshots."""
    rule = load_rule(args)
    config = build_config(args)
    pattern = load_pattern(args.pattern) if args.pattern else None

    name = args.rule.replace("/", "_").replace("=", "")
    gif_path, snapshot_paths = visualize_rule(
        rule,
        name,
        width=config.width,
        height=config.height,
        steps=config.steps,
        density=config.density,
        pattern=pattern,
        output_dir=args.output,
        cell_size=args.cell_size,
        seed=config.seed,
    )

    print(f"Saved:")
    print(f"  Animation: {gif_path}")
    for path in snapshot_paths:
        print(f"  Snapshot: {path}")


def cmd_evaluate(args):
    """Evaluate a rule and show run statistics."""
    rule = load_rule(args)
    config = build_config(args)

    print(f"Evaluating rule: {args.rule}")
    print(f"  Grid size: {config.width}x{config.height}")
    print(f"  Steps: {config.steps}")
    print(f"  Trials: {args.trials}")
    print()

    metrics = evaluate_rule(
        rule,
        width=config.width,
        height=config.height,
        steps=config.steps,
        density=config.density,
        num_trials=args.trials,
        rng=np.random.default_rng(config.seed),
    )

    print("Metrics:")
    print(f"  Lambda parameter:      {metrics.lambda_param:.4f}")
    print(f"  Spatial entropy:       {metrics.spatial_entropy:.4f}")
    print(f"  Temporal change:       {metrics.temporal_change:.4f}")
    print(f"  Compression ratio:     {metrics.compression_ratio:.4f}")
    print(f"  Population variation:  {metrics.population_variation:.4f}")
    print(f"  Activity persistence:  {metrics.activity_persistence:.4f}")
    print(f"  Clusters:              {metrics.cluster_count:.1f}")
    print(f"  Final density:         {metrics.final_density:.4f}")


def cmd_rule(args):
    """Inspect a rule code, or compute the code of a life-like rule."""
    if args.life:
        try:
            rule = Rule.from_life_like(args.life)
        except ValueError as e:
            print(f"Error parsing rule '{args.life}': {e}")
            sys.exit(1)
        print(rule.to_code())
        if rule.table[CODE_BITS:].any():
            print(f"Note: entries {CODE_BITS}-511 of {args.life} are not carried by the code")
        return

    try:
        rule = Rule.from_code(args.code)
    except ValueError as e:
        print(f"Error parsing rule '{args.code}': {e}")
        sys.exit(1)

    live = [code for code in range(len(rule)) if rule[code]]
    print(f"Rule {args.code}: {len(live)} live entries, lambda {rule.lambda_parameter():.4f}")
    for code in live:
        block = decode_state(code)
        rows = ["".join("#" if alive else "." for alive in row) for row in block]
        print(f"  {code:3d}  {' '.join(rows)}")


def add_simulation_args(parser, width=80, height=24, steps=100):
    parser.add_argument("rule", type=str, help="Rule code (base-64), or B/S notation with --life")
    parser.add_argument("--life", action="store_true", help="Interpret the rule as B/S notation (e.g. B3/S23)")
    parser.add_argument("--width", type=int, default=width, help="Grid width")
    parser.add_argument("--height", type=int, default=height, help="Grid height")
    parser.add_argument("--steps", type=int, default=steps, help="Simulation steps")
    parser.add_argument("--density", type=float, default=DEFAULT_DENSITY, help="Initial live-cell probability")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="hemoglobin - two-state 3x3 cellular automata driven by rule codes"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Run command
    run_parser = subparsers.add_parser("run", help="Simulate a rule in the terminal")
    add_simulation_args(run_parser, steps=20)
    run_parser.add_argument("--pattern", type=Path, default=None, help="Pattern file ('#' = live cell)")
    run_parser.add_argument("--offset-x", type=int, default=0, help="Pattern x offset")
    run_parser.add_argument("--offset-y", type=int, default=0, help="Pattern y offset")
    run_parser.add_argument("--delay", type=float, default=0.0, help="Seconds to wait between frames")
    run_parser.set_defaults(func=cmd_run)

    # Visualize command
    viz_parser = subparsers.add_parser("visualize", help="Render a rule to GIF/PNG")
    add_simulation_args(viz_parser, width=100, height=100, steps=200)
    viz_parser.add_argument("--pattern", type=Path, default=None, help="Pattern file ('#' = live cell)")
    viz_parser.add_argument("--cell-size", type=int, default=4, help="Cell size in pixels")
    viz_parser.add_argument("-o", "--output", type=str, default="output", help="Output directory")
    viz_parser.set_defaults(func=cmd_visualize)

    # Evaluate command
    eval_parser = subparsers.add_parser("evaluate", help="Show run statistics for a rule")
    add_simulation_args(eval_parser, width=64, height=64, steps=100)
    eval_parser.add_argument("--trials", type=int, default=3, help="Number of trials to average")
    eval_parser.set_defaults(func=cmd_evaluate)

    # Rule command
    rule_parser = subparsers.add_parser("rule", help="Inspect or build rule codes")
    group = rule_parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--code", type=str, help="Rule code to inspect")
    group.add_argument("--life", type=str, help="B/S notation to convert to a rule code")
    rule_parser.set_defaults(func=cmd_rule)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == "__main__":
    main()
