"""Report and CSV output for ISO exercise plans."""

from .csv_generators import (
    save_all_plan_csvs,
    save_optimization_summary_csv,
    save_sensitivity_csv,
    save_tiles_csv,
)
from .plan_report import format_optimization_report, format_tax_result

__all__ = [
    'format_optimization_report',
    'format_tax_result',
    'save_all_plan_csvs',
    'save_optimization_summary_csv',
    'save_sensitivity_csv',
    'save_tiles_csv',
]
