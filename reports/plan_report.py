"""
Plain-text reports for ISO exercise plans.

The plan report carries the same sections a CPA hand-off needs: the
scenario, the recommended exercise, the tax breakdown, the alternative
tiles and the FMV sensitivity.
"""

from typing import List, Optional

from calculators.components import (
    CompleteOptimizationResult,
    FilingStatus,
    OptimizationInput,
    SensitivityResult,
    TaxResult,
)

TILE_LABELS = {
    0.25: "Conservative (25%)",
    0.5: "Moderate (50%)",
    1.0: "Aggressive (100%)",
}

DISCLAIMER = (
    "Estimates cover federal regular tax and AMT for ISO exercise only. They exclude state tax, "
    "NIIT and AMT credit carryforward, and are not tax advice. Review with a tax professional "
    "before exercising."
)


def _money(value: float) -> str:
    return f"${value:,.0f}"


def format_tax_result(result: TaxResult) -> str:
    """Format a calculator result for display."""
    lines = []
    lines.append("Tax Details")
    lines.append("=" * 50)
    lines.append(f"  Regular Taxable Income: {_money(result.regular_taxable_income)}")
    lines.append(f"  Regular Tax:            {_money(result.regular_tax)}")
    lines.append(f"  Bargain Element:        {_money(result.bargain_element)}")
    lines.append(f"  AMT Income:             {_money(result.amt_income)}")
    lines.append(f"  AMT Exemption:          {_money(result.amt_exemption_amount)}")
    lines.append(f"  AMT Taxable Income:     {_money(result.amt_taxable_income)}")
    lines.append(f"  Tentative Minimum Tax:  {_money(result.tentative_minimum_tax)}")
    lines.append(f"  AMT Owed:               {_money(result.amt_owed)}")
    lines.append(f"  Total Tax:              {_money(result.total_tax_owed)}")
    lines.append(f"  Effective Rate:         {result.effective_tax_rate:.2%}")
    return "\n".join(lines)


def _sensitivity_row(label: str, entry: Optional[SensitivityResult]) -> str:
    if entry is None:
        return f"  {label:<14} {'n/a':>12} {'n/a':>12} {'n/a':>14}"
    return f"  {label:<14} ${entry.fmv:>11,.2f} {entry.max_shares:>12,} {_money(entry.projected_amt):>14}"


def format_optimization_report(
    opt_input: OptimizationInput,
    result: CompleteOptimizationResult,
    tax_year: int
) -> str:
    """
    Format a complete optimization as a plain-text exercise plan.

    Args:
        opt_input: The inputs the plan was computed from
        result: Output of perform_complete_optimization()
        tax_year: Tax year of the parameter table used

    Returns:
        Multi-line report string
    """
    optimal = result.optimal
    lines: List[str] = []

    lines.append("ISO AMT Exercise Plan")
    lines.append("=" * 60)
    lines.append(f"Tax Year: {tax_year}")
    lines.append("")

    lines.append("SCENARIO:")
    lines.append(f"  Filing Status:        {FilingStatus(opt_input.filing_status).value}")
    lines.append(f"  Ordinary Income:      {_money(opt_input.ordinary_income)}")
    lines.append(f"  Itemized Deductions:  {_money(opt_input.itemized_deductions)}")
    lines.append(f"  ISO Strike Price:     ${opt_input.iso_strike:,.2f}")
    lines.append(f"  Current FMV:          ${opt_input.iso_fmv:,.2f}")
    lines.append(f"  Available Shares:     {opt_input.total_shares_available:,}")
    lines.append(f"  AMT Budget:           {_money(opt_input.target_amt_budget)}")
    lines.append("")

    lines.append("RECOMMENDED EXERCISE PLAN:")
    lines.append(f"  Exercise:             {optimal.max_shares:,} shares")
    lines.append(f"  Cash Needed:          {_money(optimal.cash_needed)}")
    lines.append(f"  Bargain Element:      {_money(optimal.bargain_element)}")
    lines.append(f"  Projected AMT:        {_money(optimal.projected_amt)}")
    lines.append(f"  Projected Total Tax:  {_money(optimal.projected_total_tax)}")
    lines.append(f"  Budget Utilization:   {optimal.utilization_rate:.1f}%")
    lines.append("")

    lines.append(format_tax_result(optimal.tax_details))
    lines.append("")

    lines.append("ALTERNATIVE SCENARIOS:")
    lines.append(f"  {'Scenario':<20} {'Shares':>10} {'Cash Needed':>13} {'Bargain':>13} {'AMT':>12}")
    lines.append(f"  {'-' * 70}")
    for tile in result.tiles:
        label = TILE_LABELS.get(tile.percentage, f"{tile.percentage:.0%}")
        lines.append(
            f"  {label:<20} {tile.shares:>10,} {_money(tile.cash_needed):>13} "
            f"{_money(tile.bargain_element):>13} {_money(tile.projected_amt):>12}"
        )
    lines.append("")

    lines.append("SENSITIVITY ANALYSIS (FMV changes):")
    lines.append(f"  {'Scenario':<14} {'FMV':>12} {'Max Shares':>12} {'Projected AMT':>14}")
    lines.append(f"  {'-' * 55}")
    lines.append(_sensitivity_row("FMV -10%", result.down))
    lines.append(
        f"  {'Current FMV':<14} ${opt_input.iso_fmv:>11,.2f} {optimal.max_shares:>12,} "
        f"{_money(optimal.projected_amt):>14}"
    )
    lines.append(_sensitivity_row("FMV +10%", result.up))
    lines.append("")

    lines.append(DISCLAIMER)

    return "\n".join(lines)
