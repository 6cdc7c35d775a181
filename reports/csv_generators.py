"""
CSV generators for ISO exercise plans.

Rows are built from the result dataclasses with asdict(), so fields added
to a result record appear in its CSV without changes here.
"""

import csv
import os
from dataclasses import asdict, fields
from typing import Any, Dict, List

from calculators.components import (
    CompleteOptimizationResult,
    FilingStatus,
    OptimizationInput,
    SensitivityResult,
    TileResult,
)


def _write_rows(output_path: str, rows: List[Dict[str, Any]], fieldnames: List[str]) -> None:
    directory = os.path.dirname(output_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(output_path, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)


def _input_row(opt_input: OptimizationInput) -> Dict[str, Any]:
    row = asdict(opt_input)
    row['filing_status'] = FilingStatus(opt_input.filing_status).value
    return row


def save_optimization_summary_csv(
    opt_input: OptimizationInput,
    result: CompleteOptimizationResult,
    output_path: str,
    tax_year: int = None
) -> None:
    """
    Save the inputs, the recommended plan and its tax breakdown as one row.

    Args:
        opt_input: Inputs the plan was computed from
        result: Output of perform_complete_optimization()
        output_path: Path to save the CSV file
        tax_year: Tax year of the parameter table, if known
    """
    optimal = result.optimal
    row = {'tax_year': tax_year}
    row.update(_input_row(opt_input))
    row.update({
        'max_shares': optimal.max_shares,
        'projected_amt': optimal.projected_amt,
        'projected_total_tax': optimal.projected_total_tax,
        'bargain_element': optimal.bargain_element,
        'utilization_rate': optimal.utilization_rate,
        'cash_needed': optimal.cash_needed,
    })
    # Tax detail columns are prefixed to keep them apart from the plan columns
    row.update({f"tax_{key}": value for key, value in asdict(optimal.tax_details).items()})

    _write_rows(output_path, [row], list(row.keys()))


def save_tiles_csv(result: CompleteOptimizationResult, output_path: str) -> None:
    """Save the 25/50/100% tiles, one row per tile."""
    rows = [asdict(tile) for tile in result.tiles]
    _write_rows(output_path, rows, [f.name for f in fields(TileResult)])


def save_sensitivity_csv(result: CompleteOptimizationResult, output_path: str) -> None:
    """
    Save the FMV sensitivity rows.

    Skipped adjustments (FMV at or below strike) are written with a
    'skipped' status and empty values rather than zeros.
    """
    fieldnames = ['scenario', 'status'] + [f.name for f in fields(SensitivityResult)]
    rows = []

    for scenario, entry in (('down', result.down), ('up', result.up)):
        if entry is None:
            rows.append({'scenario': scenario, 'status': 'skipped'})
        else:
            rows.append({'scenario': scenario, 'status': 'computed', **asdict(entry)})

    _write_rows(output_path, rows, fieldnames)


def save_all_plan_csvs(
    opt_input: OptimizationInput,
    result: CompleteOptimizationResult,
    output_dir: str,
    tax_year: int = None
) -> Dict[str, str]:
    """
    Save every plan CSV into a directory.

    Returns:
        Mapping of CSV name to the path written
    """
    os.makedirs(output_dir, exist_ok=True)

    paths = {
        'summary': os.path.join(output_dir, 'optimization_summary.csv'),
        'tiles': os.path.join(output_dir, 'exercise_tiles.csv'),
        'sensitivity': os.path.join(output_dir, 'fmv_sensitivity.csv'),
    }

    save_optimization_summary_csv(opt_input, result, paths['summary'], tax_year=tax_year)
    save_tiles_csv(result, paths['tiles'])
    save_sensitivity_csv(result, paths['sensitivity'])

    return paths
