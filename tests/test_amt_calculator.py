"""
Tests for the regular tax and AMT calculator.

Covers bracket tax, deduction selection, bargain element, AMT exemption
phaseout, the two-tier AMT schedule and incremental AMT.
"""

import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from calculators.amt_calculator import (
    calculate_amt_exemption_with_phaseout,
    calculate_incremental_amt,
    calculate_tax,
    calculate_tax_from_brackets,
    calculate_tentative_minimum_tax,
)
from calculators.components import FilingStatus, TaxInput
from calculators.tax_constants import TAX_PARAMS_2024, TAX_PARAMS_2025


def make_input(income, shares=0, strike=1.0, fmv=1.0, deductions=0, status='single', other=0.0):
    return TaxInput(
        ordinary_income=income,
        itemized_deductions=deductions,
        filing_status=status,
        iso_strike=strike,
        iso_fmv=fmv,
        shares_exercised=shares,
        other_amt_adjustments=other
    )


def test_regular_tax_with_standard_deduction():
    """$75K single filer in 2024 takes the $14,600 standard deduction."""
    print("\nTest: Regular tax with standard deduction")
    print("-" * 50)

    result = calculate_tax(make_input(75000), TAX_PARAMS_2024)

    print(f"Taxable income: ${result.regular_taxable_income:,.2f}")
    print(f"Regular tax: ${result.regular_tax:,.2f}")

    assert result.regular_taxable_income == 60400
    # 1,160 + 4,266 + 2,915
    assert abs(result.regular_tax - 8341) < 0.01, f"Expected ~$8,341, got ${result.regular_tax:,.2f}"
    assert result.amt_owed == 0
    assert abs(result.total_tax_owed - 8341) < 0.01
    assert abs(result.effective_tax_rate - 8341 / 75000) < 1e-9


def test_itemized_deductions_used_when_larger():
    """Itemized deductions replace the standard deduction when larger."""
    result = calculate_tax(make_input(100000, deductions=30000), TAX_PARAMS_2024)
    assert result.regular_taxable_income == 70000

    smaller = calculate_tax(make_input(100000, deductions=5000), TAX_PARAMS_2024)
    assert smaller.regular_taxable_income == 100000 - 14600

    print("✓ Larger of itemized and standard deduction applied")


def test_taxable_income_floored_at_zero():
    result = calculate_tax(make_input(10000), TAX_PARAMS_2024)
    assert result.regular_taxable_income == 0
    assert result.regular_tax == 0


def test_zero_income_zero_tax():
    """No income, no deductions, no exercise means no tax of any kind."""
    result = calculate_tax(make_input(0), TAX_PARAMS_2024)

    assert result.regular_tax == 0
    assert result.amt_owed == 0
    assert result.total_tax_owed == 0
    assert result.effective_tax_rate == 0

    print("✓ Zero income produces zero tax and zero effective rate")


def test_bargain_element_and_amt_income():
    """$150K income with 10,000 shares at $1 strike / $10 FMV."""
    print("\nTest: Bargain element and AMT income")
    print("-" * 50)

    result = calculate_tax(make_input(150000, shares=10000, strike=1.0, fmv=10.0), TAX_PARAMS_2024)

    print(f"Bargain element: ${result.bargain_element:,.2f}")
    print(f"AMT income: ${result.amt_income:,.2f}")
    print(f"Tentative minimum tax: ${result.tentative_minimum_tax:,.2f}")
    print(f"Regular tax: ${result.regular_tax:,.2f}")
    print(f"AMT owed: ${result.amt_owed:,.2f}")

    assert result.bargain_element == 90000
    assert result.amt_income == 240000
    assert result.amt_exemption_amount == 85700
    assert result.amt_taxable_income == 154300
    assert abs(result.tentative_minimum_tax - 40118) < 0.01
    assert abs(result.regular_tax - 25538.5) < 0.01
    assert abs(result.amt_owed - 14579.5) < 0.01
    assert abs(result.total_tax_owed - (result.regular_tax + result.amt_owed)) < 1e-9
    assert abs(result.effective_tax_rate - result.total_tax_owed / 240000) < 1e-9


def test_exemption_below_phaseout_start():
    """$100K income with 5,000 shares at $1 / $5 keeps the full exemption."""
    result = calculate_tax(make_input(100000, shares=5000, strike=1.0, fmv=5.0), TAX_PARAMS_2024)

    assert result.bargain_element == 20000
    assert result.amt_exemption_amount == 85700
    assert abs(result.amt_taxable_income - 34300) < 0.01
    assert result.amt_owed == 0

    print("✓ Full AMT exemption below phaseout start")


def test_no_bargain_element_when_underwater():
    """FMV at or below strike produces no bargain element regardless of shares."""
    underwater = calculate_tax(make_input(150000, shares=50000, strike=10.0, fmv=8.0), TAX_PARAMS_2024)
    at_strike = calculate_tax(make_input(150000, shares=50000, strike=10.0, fmv=10.0), TAX_PARAMS_2024)
    baseline = calculate_tax(make_input(150000), TAX_PARAMS_2024)

    assert underwater.bargain_element == 0
    assert at_strike.bargain_element == 0
    assert underwater.amt_income == baseline.amt_income


def test_amt_income_ignores_deductions():
    """Deductions reduce regular taxable income but not AMT income."""
    result = calculate_tax(make_input(150000, shares=1000, strike=1.0, fmv=3.0, deductions=40000), TAX_PARAMS_2024)
    assert result.regular_taxable_income == 110000
    assert result.amt_income == 152000


def test_other_amt_adjustments_default_zero():
    explicit = calculate_tax(make_input(150000, other=0.0), TAX_PARAMS_2024)
    implicit = calculate_tax(
        TaxInput(
            ordinary_income=150000,
            itemized_deductions=0,
            filing_status=FilingStatus.SINGLE,
            iso_strike=1.0,
            iso_fmv=1.0,
            shares_exercised=0
        ),
        TAX_PARAMS_2024
    )
    assert explicit == implicit

    adjusted = calculate_tax(make_input(150000, other=25000), TAX_PARAMS_2024)
    assert adjusted.amt_income == 175000


def test_exemption_phaseout():
    """Exemption drops by 25 cents per dollar over the phaseout start."""
    print("\nTest: AMT exemption phaseout")
    print("-" * 50)

    partial = calculate_tax(make_input(700000), TAX_PARAMS_2024)
    expected = 85700 - (700000 - 609350) * 0.25
    print(f"AMT income: $700,000 -> exemption ${partial.amt_exemption_amount:,.2f}")
    assert abs(partial.amt_exemption_amount - expected) < 0.01

    full = calculate_tax(make_input(1000000), TAX_PARAMS_2024)
    print(f"AMT income: $1,000,000 -> exemption ${full.amt_exemption_amount:,.2f}")
    assert full.amt_exemption_amount == 0

    # Strictly decreasing inside the phaseout range
    lower = calculate_amt_exemption_with_phaseout(620000, 85700, 609350, 0.25)
    higher = calculate_amt_exemption_with_phaseout(640000, 85700, 609350, 0.25)
    assert higher < lower < 85700
    assert abs((lower - higher) - 20000 * 0.25) < 1e-9


def test_exemption_helper_at_phaseout_start():
    assert calculate_amt_exemption_with_phaseout(609350, 85700, 609350, 0.25) == 85700
    assert calculate_amt_exemption_with_phaseout(5_000_000, 85700, 609350, 0.25) == 0


def test_two_tier_tentative_minimum_tax():
    rates = TAX_PARAMS_2024.for_status('single').amt_rate

    assert calculate_tentative_minimum_tax(0, rates) == 0
    assert calculate_tentative_minimum_tax(-100, rates) == 0
    assert abs(calculate_tentative_minimum_tax(100000, rates) - 26000) < 1e-6
    assert abs(calculate_tentative_minimum_tax(220700, rates) - 57382) < 1e-6
    # 220,700 at 26% + 79,300 at 28%
    assert abs(calculate_tentative_minimum_tax(300000, rates) - 79586) < 1e-6

    print("✓ Two-tier AMT schedule")


def test_bracket_tax_top_bracket_unbounded():
    brackets = TAX_PARAMS_2024.for_status('single').regular_brackets

    assert calculate_tax_from_brackets(0, brackets) == 0
    assert abs(calculate_tax_from_brackets(11600, brackets) - 1160) < 1e-6
    assert abs(calculate_tax_from_brackets(1_000_000, brackets) - 328187.75) < 0.01


def test_married_uses_married_table():
    result = calculate_tax(make_input(200000, status='married'), TAX_PARAMS_2024)
    assert result.regular_taxable_income == 200000 - 29200

    same = calculate_tax(make_input(200000, status=FilingStatus.MARRIED), TAX_PARAMS_2024)
    assert result == same


def test_tax_year_tables_differ():
    result_2024 = calculate_tax(make_input(75000), TAX_PARAMS_2024)
    result_2025 = calculate_tax(make_input(75000), TAX_PARAMS_2025)

    assert result_2024.regular_taxable_income == 60400
    assert result_2025.regular_taxable_income == 60000
    assert result_2025.regular_tax < result_2024.regular_tax


def test_tax_invariants_hold():
    """Regular tax and AMT are non-negative and total is their sum."""
    for status in ('single', 'married'):
        for income in (0, 25000, 90000, 250000, 800000, 2_000_000):
            for shares in (0, 1000, 25000):
                result = calculate_tax(
                    make_input(income, shares=shares, strike=2.0, fmv=30.0, status=status),
                    TAX_PARAMS_2024
                )
                assert result.regular_tax >= 0
                assert result.amt_owed >= 0
                assert abs(result.total_tax_owed - (result.regular_tax + result.amt_owed)) < 1e-6
                assert result.total_tax_owed >= result.regular_tax

    print("✓ Tax invariants hold across income/share grid")


def test_amt_monotonic_in_shares():
    """AMT owed never decreases as more shares are exercised."""
    for params in (TAX_PARAMS_2024, TAX_PARAMS_2025):
        for status in ('single', 'married'):
            previous = -1.0
            for shares in range(0, 60001, 1500):
                result = calculate_tax(
                    make_input(180000, shares=shares, strike=0.5, fmv=25.0, status=status),
                    params
                )
                assert result.amt_owed >= previous, (
                    f"AMT decreased at {shares} shares ({params.year}, {status})"
                )
                previous = result.amt_owed

    print("✓ AMT owed is non-decreasing in shares exercised")


def test_incremental_amt():
    """Incremental AMT isolates the AMT caused by the exercise."""
    baseline = make_input(150000, shares=0, strike=1.0, fmv=10.0)
    exercise = make_input(150000, shares=10000, strike=1.0, fmv=10.0)

    incremental = calculate_incremental_amt(baseline, exercise, TAX_PARAMS_2024)
    assert abs(incremental - 14579.5) < 0.01

    # Baseline with more AMT than the "exercise" scenario floors at zero
    assert calculate_incremental_amt(exercise, baseline, TAX_PARAMS_2024) == 0

    # AMT from other adjustments in both scenarios is not attributed to the exercise
    baseline_adjusted = make_input(150000, shares=0, strike=1.0, fmv=10.0, other=100000)
    exercise_adjusted = make_input(150000, shares=1000, strike=1.0, fmv=10.0, other=100000)
    baseline_tax = calculate_tax(baseline_adjusted, TAX_PARAMS_2024)
    exercise_tax = calculate_tax(exercise_adjusted, TAX_PARAMS_2024)
    assert baseline_tax.amt_owed > 0
    incremental_adjusted = calculate_incremental_amt(baseline_adjusted, exercise_adjusted, TAX_PARAMS_2024)
    assert abs(incremental_adjusted - (exercise_tax.amt_owed - baseline_tax.amt_owed)) < 1e-9

    print("✓ Incremental AMT")


def run_all_tests():
    """Run all test cases."""
    print("Running AMT Calculator Tests")
    print("=" * 70)

    test_regular_tax_with_standard_deduction()
    test_itemized_deductions_used_when_larger()
    test_taxable_income_floored_at_zero()
    test_zero_income_zero_tax()
    test_bargain_element_and_amt_income()
    test_exemption_below_phaseout_start()
    test_no_bargain_element_when_underwater()
    test_amt_income_ignores_deductions()
    test_other_amt_adjustments_default_zero()
    test_exemption_phaseout()
    test_exemption_helper_at_phaseout_start()
    test_two_tier_tentative_minimum_tax()
    test_bracket_tax_top_bracket_unbounded()
    test_married_uses_married_table()
    test_tax_year_tables_differ()
    test_tax_invariants_hold()
    test_amt_monotonic_in_shares()
    test_incremental_amt()

    print("\nAll tests completed successfully!")


if __name__ == "__main__":
    run_all_tests()
