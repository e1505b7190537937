#!/usr/bin/env python
"""
Width Sweep Script

Solves one key range for every width of a domain and reports:
1. Widths where the solver raised an invariant error
2. Widths yielding a perfect keyboard
3. How often each width tier fired

Usage:
    python scripts/sweep_widths.py --keys 88
    python scripts/sweep_widths.py --left 0 --right 127 --min-width 750 --max-width 65408
"""

import argparse
from collections import Counter
from pathlib import Path
import json
import sys

from tqdm import tqdm

sys.path.insert(0, str(Path(__file__).parent.parent))

from piano_keyboard.keyboard.builder import STANDARD_PIANOS
from piano_keyboard.keyboard.layout import LayoutAssembler
from piano_keyboard.keyboard.errors import ConfigurationError, SolverInvariantError
from piano_keyboard.keyboard.specification import KeyboardSpecification, MAX_WIDTH
from piano_keyboard.keyboard.sub_width_solver import SubWidthSolver
from piano_keyboard.keyboard.width_solver import WidthSolver
from piano_keyboard.utils.logging_utils import setup_logging, get_logger

logger = get_logger(__name__)


def sweep_sample(spec: KeyboardSpecification, tier_counts: Counter) -> dict:
    """Solve a single width."""
    result = {
        'width': spec.width,
        'success': False,
        'perfect': False,
        'error': None
    }

    try:
        width_solution = WidthSolver(spec).solve()
        sub_solution = SubWidthSolver(spec, width_solution).solve()
        layout = LayoutAssembler(spec, width_solution, sub_solution).assemble()
        tier_counts.update(t.value for t in width_solution.diagnostics.tiers)
        result['success'] = True
        result['perfect'] = layout.is_perfect()
        result['height'] = layout.height
    except SolverInvariantError as e:
        result['error'] = str(e)
        logger.error(f"Width {spec.width}: {e}")

    return result


def main():
    parser = argparse.ArgumentParser(description="Sweep keyboard widths")
    parser.add_argument("--keys", type=int, choices=sorted(STANDARD_PIANOS),
                        help="Standard piano size")
    parser.add_argument("--left", type=int, default=21, help="Left white key")
    parser.add_argument("--right", type=int, default=108, help="Right white key")
    parser.add_argument("--min-width", type=int, default=None,
                        help="First width (default: minimum for the range)")
    parser.add_argument("--max-width", type=int, default=MAX_WIDTH, help="Last width")
    parser.add_argument("--step", type=int, default=1, help="Width step")
    parser.add_argument("--no-gaps", action="store_true",
                        help="No gaps between black and white keys")
    parser.add_argument("--output", type=str, default=None,
                        help="Write per width results as JSON")

    args = parser.parse_args()

    setup_logging(use_tqdm=True)

    left, right = STANDARD_PIANOS[args.keys] if args.keys else (args.left, args.right)
    base = KeyboardSpecification(left_white_key=left, right_white_key=right,
                                 need_black_gap=not args.no_gaps)
    try:
        base.validate()
    except ConfigurationError as e:
        logger.error(f"Invalid key range: {e}")
        sys.exit(1)

    min_width = args.min_width if args.min_width is not None else base.min_width
    widths = range(max(min_width, base.min_width), args.max_width + 1, args.step)

    tier_counts = Counter()
    all_results = []
    for width in tqdm(widths, desc=f"Sweeping {left}..{right}"):
        spec = KeyboardSpecification(left_white_key=left, right_white_key=right, width=width,
                                     need_black_gap=base.need_black_gap)
        all_results.append(sweep_sample(spec, tier_counts))

    # Summary
    failures = [r['width'] for r in all_results if not r['success']]
    perfect = [r['width'] for r in all_results if r['perfect']]
    logger.info(f"Solved: {len(all_results) - len(failures)}/{len(all_results)}")
    logger.info(f"Perfect: {len(perfect)}")
    for tier, count in tier_counts.most_common():
        logger.info(f"  {tier}: {count}")
    if failures:
        logger.error(f"Failed widths: {failures[:20]}{' ...' if len(failures) > 20 else ''}")

    if args.output:
        with open(args.output, 'w') as f:
            json.dump({
                'left_white_key': left,
                'right_white_key': right,
                'tier_counts': dict(tier_counts),
                'results': all_results
            }, f, indent=2)
        logger.info(f"Results saved to: {args.output}")

    sys.exit(1 if failures else 0)


if __name__ == "__main__":
    main()
