"""
Federal tax parameter tables indexed by tax year.

Each supported year has one immutable TaxParameters instance holding the
regular brackets, standard deduction, AMT exemption and phaseout, and the
two-tier AMT rate structure for every supported filing status. Years share
shape only; no value in one table is derived from another.

Sources: IRS Rev. Proc. 2023-34 (2024 values) and Rev. Proc. 2024-40
(2025 values).
"""

from types import MappingProxyType
from typing import Iterable, Tuple

from calculators.components import (
    AMTRateStructure,
    FilingStatus,
    FilingStatusParams,
    TaxBracket,
    TaxParameters,
)


# Default tax year for calculations
DEFAULT_TAX_YEAR = 2025

# AMT Phaseout Rate
AMT_PHASEOUT_RATE = 0.25  # 25 cents per dollar of AMT income above threshold

# AMT Tax Rates
AMT_RATE_LOW = 0.26
AMT_RATE_HIGH = 0.28


def _brackets(rows: Iterable[Tuple[float, float, float]]) -> Tuple[TaxBracket, ...]:
    """Build brackets from (lower_bound, upper_bound, rate) rows."""
    return tuple(TaxBracket(lower, upper, rate) for lower, upper, rate in rows)


# ===== 2024 =====

TAX_PARAMS_2024 = TaxParameters(
    year=2024,
    filing_status={
        FilingStatus.SINGLE: FilingStatusParams(
            standard_deduction=14600,
            amt_exemption=85700,
            amt_phaseout_start=609350,
            amt_phaseout_rate=AMT_PHASEOUT_RATE,
            regular_brackets=_brackets([
                (0, 11600, 0.10),
                (11600, 47150, 0.12),
                (47150, 100525, 0.22),
                (100525, 191950, 0.24),
                (191950, 243725, 0.32),
                (243725, 609350, 0.35),
                (609350, float('inf'), 0.37),
            ]),
            amt_rate=AMTRateStructure(threshold=220700, lower_rate=AMT_RATE_LOW, upper_rate=AMT_RATE_HIGH),
        ),
        FilingStatus.MARRIED: FilingStatusParams(
            standard_deduction=29200,
            amt_exemption=133300,
            amt_phaseout_start=1218700,
            amt_phaseout_rate=AMT_PHASEOUT_RATE,
            regular_brackets=_brackets([
                (0, 23200, 0.10),
                (23200, 94300, 0.12),
                (94300, 201050, 0.22),
                (201050, 383900, 0.24),
                (383900, 487450, 0.32),
                (487450, 731200, 0.35),
                (731200, float('inf'), 0.37),
            ]),
            amt_rate=AMTRateStructure(threshold=220700, lower_rate=AMT_RATE_LOW, upper_rate=AMT_RATE_HIGH),
        ),
    },
)

# ===== 2025 =====

TAX_PARAMS_2025 = TaxParameters(
    year=2025,
    filing_status={
        FilingStatus.SINGLE: FilingStatusParams(
            standard_deduction=15000,
            amt_exemption=88100,
            amt_phaseout_start=626350,
            amt_phaseout_rate=AMT_PHASEOUT_RATE,
            regular_brackets=_brackets([
                (0, 11925, 0.10),
                (11925, 48475, 0.12),
                (48475, 103350, 0.22),
                (103350, 197300, 0.24),
                (197300, 250525, 0.32),
                (250525, 626350, 0.35),
                (626350, float('inf'), 0.37),
            ]),
            amt_rate=AMTRateStructure(threshold=220700, lower_rate=AMT_RATE_LOW, upper_rate=AMT_RATE_HIGH),
        ),
        FilingStatus.MARRIED: FilingStatusParams(
            standard_deduction=30000,
            amt_exemption=137000,
            amt_phaseout_start=1252700,
            amt_phaseout_rate=AMT_PHASEOUT_RATE,
            regular_brackets=_brackets([
                (0, 23850, 0.10),
                (23850, 96950, 0.12),
                (96950, 206700, 0.22),
                (206700, 394600, 0.24),
                (394600, 501050, 0.32),
                (501050, 751600, 0.35),
                (751600, float('inf'), 0.37),
            ]),
            amt_rate=AMTRateStructure(threshold=220700, lower_rate=AMT_RATE_LOW, upper_rate=AMT_RATE_HIGH),
        ),
    },
)

TAX_PARAMETERS_BY_YEAR = MappingProxyType({
    2024: TAX_PARAMS_2024,
    2025: TAX_PARAMS_2025,
})

SUPPORTED_TAX_YEARS = tuple(sorted(TAX_PARAMETERS_BY_YEAR))


def get_tax_parameters(year: int = DEFAULT_TAX_YEAR) -> TaxParameters:
    """
    Get the parameter table for a tax year.

    Args:
        year: Tax year to look up

    Returns:
        TaxParameters for that year

    Raises:
        ValueError: If no table exists for the year
    """
    if year not in TAX_PARAMETERS_BY_YEAR:
        supported = ', '.join(str(y) for y in SUPPORTED_TAX_YEARS)
        raise ValueError(f"Tax year {year} not supported. Supported years: {supported}")
    return TAX_PARAMETERS_BY_YEAR[year]
