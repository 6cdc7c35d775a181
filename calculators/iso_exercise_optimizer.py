"""
ISO exercise optimizer.

Finds the most ISO shares that can be exercised without the AMT caused by
the exercise exceeding a budget, and builds the comparison scenarios shown
alongside that recommendation:

- find_max_shares_within_amt_budget(): binary search over share counts
- calculate_tiles(): fixed percentages of available shares, no budget
- perform_sensitivity_analysis(): optimizer re-run at perturbed FMVs
- perform_complete_optimization(): all of the above in one result

The binary search relies on AMT owed being non-decreasing in the number of
shares exercised. More bargain element can only raise AMT income, and AMT
owed is non-decreasing in AMT income under the two-tier schedule.
"""

import math
from dataclasses import replace
from typing import List, Optional, Sequence

from calculators.amt_calculator import calculate_tax
from calculators.components import (
    CompleteOptimizationResult,
    OptimizationInput,
    OptimizationResult,
    SensitivityResult,
    TaxParameters,
    TaxResult,
    TileResult,
)


# Floating-point allowance when comparing incremental AMT to the budget ($0.01)
AMT_BUDGET_TOLERANCE = 0.01

DEFAULT_TILE_PERCENTAGES = (0.25, 0.5, 1.0)
DEFAULT_FMV_ADJUSTMENTS = (-0.10, 0.10)


class OptimizationInputError(ValueError):
    """Optimizer input violates a precondition; nothing was computed."""


class InvalidExerciseEconomicsError(OptimizationInputError):
    """Strike price is not below FMV, so exercising has no bargain element."""


class InvalidAmtBudgetError(OptimizationInputError):
    """Target AMT budget is negative."""


class InvalidShareCountError(OptimizationInputError):
    """Total shares available is negative or not a whole number."""


def _validated_share_count(total_shares_available) -> int:
    """Return the share count as an int, rejecting negative or fractional values."""
    if isinstance(total_shares_available, bool) or not isinstance(total_shares_available, (int, float)):
        raise InvalidShareCountError("Total shares must be a whole number")

    if total_shares_available < 0:
        raise InvalidShareCountError("Total shares available cannot be negative")

    if isinstance(total_shares_available, float) and not total_shares_available.is_integer():
        raise InvalidShareCountError("Total shares must be a whole number")

    return int(total_shares_available)


def _validate_optimization_input(opt_input: OptimizationInput) -> int:
    """Check optimizer preconditions and return the validated share count."""
    # Written as negations so a NaN price or budget is rejected too
    if not opt_input.iso_strike < opt_input.iso_fmv:
        raise InvalidExerciseEconomicsError("Strike price must be less than FMV for ISO exercise")

    if not opt_input.target_amt_budget >= 0:
        raise InvalidAmtBudgetError("AMT budget cannot be negative")

    return _validated_share_count(opt_input.total_shares_available)


def _zero_exercise_result(baseline_tax: TaxResult) -> OptimizationResult:
    """Result for exercising nothing: baseline taxes, no shares, no cash."""
    return OptimizationResult(
        max_shares=0,
        projected_amt=baseline_tax.amt_owed,
        projected_total_tax=baseline_tax.total_tax_owed,
        bargain_element=0.0,
        utilization_rate=0.0,
        cash_needed=0.0,
        tax_details=baseline_tax
    )


def find_max_shares_within_amt_budget(
    opt_input: OptimizationInput,
    params: TaxParameters
) -> OptimizationResult:
    """
    Find the maximum shares to exercise within an AMT budget.

    Incremental AMT (AMT owed with the exercise minus AMT owed at 0 shares)
    must stay within target_amt_budget + AMT_BUDGET_TOLERANCE.

    Args:
        opt_input: Income, ISO details, shares available and AMT budget
        params: Parameter table for the tax year

    Returns:
        OptimizationResult for the best share count found

    Raises:
        InvalidExerciseEconomicsError: If strike price >= FMV
        InvalidAmtBudgetError: If the AMT budget is negative
        InvalidShareCountError: If shares available is negative or fractional
    """
    total_shares = _validate_optimization_input(opt_input)

    baseline_tax = calculate_tax(opt_input.to_tax_input(0), params)

    if total_shares == 0:
        return _zero_exercise_result(baseline_tax)

    # Budget already used up by AMT from other sources
    if baseline_tax.amt_owed >= opt_input.target_amt_budget:
        return _zero_exercise_result(baseline_tax)

    budget_limit = opt_input.target_amt_budget + AMT_BUDGET_TOLERANCE
    low, high = 0, total_shares
    best_shares = 0
    best_tax = baseline_tax

    while low <= high:
        mid = (low + high) // 2
        tax_result = calculate_tax(opt_input.to_tax_input(mid), params)
        incremental_amt = tax_result.amt_owed - baseline_tax.amt_owed

        if incremental_amt <= budget_limit:
            best_shares = mid
            best_tax = tax_result
            low = mid + 1
        else:
            high = mid - 1

    best_incremental_amt = best_tax.amt_owed - baseline_tax.amt_owed
    utilization_rate = (
        best_incremental_amt / opt_input.target_amt_budget * 100
        if opt_input.target_amt_budget > 0 else 0.0
    )

    return OptimizationResult(
        max_shares=best_shares,
        projected_amt=best_tax.amt_owed,
        projected_total_tax=best_tax.total_tax_owed,
        bargain_element=best_tax.bargain_element,
        utilization_rate=utilization_rate,
        cash_needed=best_shares * opt_input.iso_strike,
        tax_details=best_tax
    )


def calculate_tiles(
    opt_input: OptimizationInput,
    params: TaxParameters,
    percentages: Sequence[float] = DEFAULT_TILE_PERCENTAGES
) -> List[TileResult]:
    """
    Calculate exercise scenarios at fixed percentages of available shares.

    No budget is applied; each tile is a straight calculator run. Results
    are returned in the order of the percentages given.
    """
    tiles = []

    for percentage in percentages:
        shares = math.floor(opt_input.total_shares_available * percentage)
        tax_result = calculate_tax(opt_input.to_tax_input(shares), params)

        tiles.append(TileResult(
            percentage=percentage,
            shares=shares,
            cash_needed=shares * opt_input.iso_strike,
            bargain_element=tax_result.bargain_element,
            projected_amt=tax_result.amt_owed,
            projected_total_tax=tax_result.total_tax_owed
        ))

    return tiles


def perform_sensitivity_analysis(
    opt_input: OptimizationInput,
    params: TaxParameters,
    fmv_adjustments: Sequence[float] = DEFAULT_FMV_ADJUSTMENTS
) -> List[SensitivityResult]:
    """
    Re-run the optimizer with the FMV moved by each adjustment fraction.

    An adjustment that leaves FMV at or below the strike price produces no
    entry, since exercising there has no bargain element.

    Args:
        opt_input: Optimization inputs at the current FMV
        params: Parameter table for the tax year
        fmv_adjustments: Fractions applied as FMV * (1 + adjustment)

    Returns:
        One SensitivityResult per viable adjustment, in input order
    """
    results = []

    for adjustment in fmv_adjustments:
        adjusted_fmv = opt_input.iso_fmv * (1 + adjustment)

        if adjusted_fmv <= opt_input.iso_strike:
            continue

        result = find_max_shares_within_amt_budget(replace(opt_input, iso_fmv=adjusted_fmv), params)

        results.append(SensitivityResult(
            fmv_adjustment=adjustment,
            fmv=adjusted_fmv,
            max_shares=result.max_shares,
            projected_amt=result.projected_amt
        ))

    return results


def _single_sensitivity(
    opt_input: OptimizationInput,
    params: TaxParameters,
    adjustment: float
) -> Optional[SensitivityResult]:
    results = perform_sensitivity_analysis(opt_input, params, [adjustment])
    return results[0] if results else None


def perform_complete_optimization(
    opt_input: OptimizationInput,
    params: TaxParameters
) -> CompleteOptimizationResult:
    """Run the optimizer, the 25/50/100% tiles and the -10%/+10% FMV sensitivity."""
    optimal = find_max_shares_within_amt_budget(opt_input, params)

    tile25, tile50, tile100 = calculate_tiles(opt_input, params, DEFAULT_TILE_PERCENTAGES)

    down_adjustment, up_adjustment = DEFAULT_FMV_ADJUSTMENTS

    return CompleteOptimizationResult(
        optimal=optimal,
        tile25=tile25,
        tile50=tile50,
        tile100=tile100,
        down=_single_sensitivity(opt_input, params, down_adjustment),
        up=_single_sensitivity(opt_input, params, up_adjustment)
    )
