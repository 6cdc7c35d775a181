"""
Regular tax and Alternative Minimum Tax (AMT) calculator.

This module maps a single tax scenario to its full tax breakdown. It handles
progressive bracket tax, the AMT exemption phaseout and the two-tier AMT
rate structure. Every function is pure: no state, no I/O, and no exceptions
for inputs within the documented domain.

AMT income here is ordinary income plus the ISO bargain element plus other
AMT adjustments. The standard or itemized deduction is not subtracted on the
AMT side. This is the simplified AMT base the planner uses, not a Form 6251
add-back computation.
"""

from typing import Sequence

from calculators.components import (
    AMTRateStructure,
    TaxBracket,
    TaxInput,
    TaxParameters,
    TaxResult,
)


def calculate_tax_from_brackets(taxable_income: float, brackets: Sequence[TaxBracket]) -> float:
    """
    Calculate tax using progressive tax brackets.

    Args:
        taxable_income: Income subject to tax
        brackets: Contiguous brackets sorted ascending, top bracket unbounded

    Returns:
        Total tax owed
    """
    tax = 0.0

    for bracket in brackets:
        taxable_in_bracket = min(max(taxable_income - bracket.lower, 0), bracket.upper - bracket.lower)
        if taxable_in_bracket > 0:
            tax += taxable_in_bracket * bracket.rate
        if taxable_income <= bracket.upper:
            break

    return tax


def calculate_amt_exemption_with_phaseout(
    amt_income: float,
    base_exemption: float,
    phaseout_start: float,
    phaseout_rate: float
) -> float:
    """
    Calculate AMT exemption amount with phaseout.

    The exemption shrinks by phaseout_rate per dollar of AMT income above
    phaseout_start and never goes below zero.

    Args:
        amt_income: Alternative Minimum Taxable Income (AMTI)
        base_exemption: Exemption before phaseout
        phaseout_start: AMTI at which the phaseout begins
        phaseout_rate: Exemption reduction per dollar over phaseout_start

    Returns:
        AMT exemption amount after phaseout
    """
    if amt_income <= phaseout_start:
        return base_exemption

    phaseout_amount = (amt_income - phaseout_start) * phaseout_rate
    return max(0.0, base_exemption - phaseout_amount)


def calculate_tentative_minimum_tax(amt_taxable_income: float, rates: AMTRateStructure) -> float:
    """Calculate tentative minimum tax using the two-tier rate structure."""
    if amt_taxable_income <= 0:
        return 0.0

    if amt_taxable_income <= rates.threshold:
        return amt_taxable_income * rates.lower_rate

    return rates.threshold * rates.lower_rate + (amt_taxable_income - rates.threshold) * rates.upper_rate


def calculate_tax(tax_input: TaxInput, params: TaxParameters) -> TaxResult:
    """
    Calculate regular tax and AMT for a tax scenario.

    Args:
        tax_input: Income, deductions, filing status and ISO exercise
        params: Parameter table for the tax year

    Returns:
        TaxResult with the complete breakdown
    """
    status_params = params.for_status(tax_input.filing_status)

    # Regular tax: the larger of itemized and standard deduction always applies
    deduction = max(tax_input.itemized_deductions, status_params.standard_deduction)
    regular_taxable_income = max(0.0, tax_input.ordinary_income - deduction)
    regular_tax = calculate_tax_from_brackets(regular_taxable_income, status_params.regular_brackets)

    # ISO bargain element is zero when FMV <= strike
    bargain_element = tax_input.shares_exercised * max(0.0, tax_input.iso_fmv - tax_input.iso_strike)

    amt_income = tax_input.ordinary_income + bargain_element + tax_input.other_amt_adjustments

    amt_exemption_amount = calculate_amt_exemption_with_phaseout(
        amt_income,
        status_params.amt_exemption,
        status_params.amt_phaseout_start,
        status_params.amt_phaseout_rate
    )
    amt_taxable_income = max(0.0, amt_income - amt_exemption_amount)
    tentative_minimum_tax = calculate_tentative_minimum_tax(amt_taxable_income, status_params.amt_rate)

    amt_owed = max(0.0, tentative_minimum_tax - regular_tax)
    total_tax_owed = regular_tax + amt_owed

    total_income = tax_input.ordinary_income + bargain_element
    effective_tax_rate = total_tax_owed / total_income if total_income > 0 else 0.0

    return TaxResult(
        regular_taxable_income=regular_taxable_income,
        regular_tax=regular_tax,
        amt_income=amt_income,
        amt_exemption_amount=amt_exemption_amount,
        amt_taxable_income=amt_taxable_income,
        tentative_minimum_tax=tentative_minimum_tax,
        amt_owed=amt_owed,
        total_tax_owed=total_tax_owed,
        bargain_element=bargain_element,
        effective_tax_rate=effective_tax_rate
    )


def calculate_incremental_amt(
    baseline_input: TaxInput,
    exercise_input: TaxInput,
    params: TaxParameters
) -> float:
    """
    Calculate the AMT attributable to an exercise decision.

    This is the AMT owed with the exercise minus the AMT owed in the
    baseline scenario, floored at zero, so AMT the taxpayer owes regardless
    of the exercise is not counted against it.

    Args:
        baseline_input: Scenario without the exercise (typically 0 shares)
        exercise_input: Scenario with the exercise
        params: Parameter table for the tax year

    Returns:
        Incremental AMT in dollars
    """
    baseline_tax = calculate_tax(baseline_input, params)
    exercise_tax = calculate_tax(exercise_input, params)

    return max(0.0, exercise_tax.amt_owed - baseline_tax.amt_owed)
