#!/usr/bin/env python3
"""
ISO Exercise Planner - CLI for finding the most ISO shares exercisable within an AMT budget.

Loads a scenario (from a JSON file, the demo scenario, or command-line flags),
runs the complete optimization and prints the exercise plan. Optionally saves
the plan as CSV files.
"""

import argparse
import sys
import os

# Add current directory to path for imports
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from calculators.iso_exercise_optimizer import OptimizationInputError, perform_complete_optimization
from calculators.tax_constants import SUPPORTED_TAX_YEARS, get_tax_parameters
from loaders.scenario_loader import ScenarioLoader, ScenarioValidationError, parse_scenario
from reports.csv_generators import save_all_plan_csvs
from reports.plan_report import format_optimization_report

# Exit status for rejected input (client error)
EXIT_INPUT_ERROR = 2

FLAG_FIELDS = {
    'income': 'ordinary_income',
    'deductions': 'itemized_deductions',
    'filing_status': 'filing_status',
    'strike': 'iso_strike',
    'fmv': 'iso_fmv',
    'shares': 'total_shares_available',
    'budget': 'target_amt_budget',
    'tax_year': 'tax_year',
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Find the maximum ISO shares to exercise within an AMT budget',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --demo
  %(prog)s --scenario data/user_scenario.json --output-dir output/plan
  %(prog)s --income 180000 --filing-status single --strike 0.50 --fmv 25 --shares 20000 --budget 15000
        """
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument('--scenario', help='Path to scenario JSON file')
    source.add_argument('--demo', action='store_true',
                        help='Force use of the demo scenario (safe example data)')

    parser.add_argument('--income', type=float, help='Ordinary income for the year')
    parser.add_argument('--deductions', type=float, help='Itemized deductions (default 0)')
    parser.add_argument('--filing-status', choices=['single', 'married'], help='Filing status')
    parser.add_argument('--strike', type=float, help='ISO strike price per share')
    parser.add_argument('--fmv', type=float, help='Current fair market value per share')
    parser.add_argument('--shares', type=int, help='Total ISO shares available to exercise')
    parser.add_argument('--budget', type=float, help='Maximum AMT you are willing to pay')
    parser.add_argument('--tax-year', type=int, choices=SUPPORTED_TAX_YEARS, help='Tax year')

    parser.add_argument('--output-dir', help='Directory to save plan CSV files')
    parser.add_argument('--quiet', action='store_true', help='Suppress scenario loading messages')
    return parser


def _flag_values(args: argparse.Namespace) -> dict:
    values = {}
    for attr, field in FLAG_FIELDS.items():
        value = getattr(args, attr)
        if value is not None:
            values[field] = value
    return values


def main(argv=None) -> int:
    """Main entry point for the exercise planner. Returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    flag_values = _flag_values(args)

    if flag_values and (args.scenario or args.demo):
        parser.error("input flags cannot be combined with --scenario or --demo")

    try:
        if flag_values:
            opt_input, tax_year = parse_scenario(flag_values)
        else:
            loader = ScenarioLoader()
            opt_input, tax_year, _ = loader.load_scenario(
                scenario_path=args.scenario,
                verbose=not args.quiet,
                force_demo=args.demo
            )

        params = get_tax_parameters(tax_year)
        result = perform_complete_optimization(opt_input, params)
    except (ScenarioValidationError, OptimizationInputError) as e:
        print(f"❌ Invalid input: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except OSError as e:
        # Missing file, or a path that cannot be opened as a file
        print(f"❌ Could not read scenario: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    print()
    print(format_optimization_report(opt_input, result, tax_year))

    if args.output_dir:
        paths = save_all_plan_csvs(opt_input, result, args.output_dir, tax_year=tax_year)
        print(f"\n📁 Plan CSVs saved to: {args.output_dir}")
        for path in paths.values():
            print(f"  • {os.path.basename(path)}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
