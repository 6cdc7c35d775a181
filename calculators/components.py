"""
Data structures for ISO exercise tax calculations.

These dataclasses carry a tax scenario into the calculator and the results
back out. Every record is frozen, so a tax-year table can be shared by
every calculation; inputs are varied with dataclasses.replace().
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union


class FilingStatus(Enum):
    """Filing statuses supported by the parameter tables."""
    SINGLE = "single"
    MARRIED = "married"


FilingStatusLike = Union[FilingStatus, str]


@dataclass(frozen=True)
class TaxBracket:
    """One regular-tax bracket: lower bound inclusive, upper bound exclusive."""
    lower: float
    upper: float
    rate: float


@dataclass(frozen=True)
class AMTRateStructure:
    """Two-tier AMT schedule with a single break point."""
    threshold: float
    lower_rate: float
    upper_rate: float


@dataclass(frozen=True)
class FilingStatusParams:
    """Per-filing-status constants for one tax year."""
    standard_deduction: float
    amt_exemption: float
    amt_phaseout_start: float
    amt_phaseout_rate: float
    regular_brackets: Tuple[TaxBracket, ...]
    amt_rate: AMTRateStructure

    def __post_init__(self):
        """Validate that brackets are contiguous and cover [0, inf)."""
        brackets = tuple(self.regular_brackets)
        object.__setattr__(self, 'regular_brackets', brackets)

        if not brackets:
            raise ValueError("At least one tax bracket is required")
        if brackets[0].lower != 0:
            raise ValueError("First tax bracket must start at 0")
        for previous, current in zip(brackets, brackets[1:]):
            if current.lower != previous.upper:
                raise ValueError(
                    f"Tax brackets must be contiguous: bracket ending at {previous.upper} "
                    f"is followed by one starting at {current.lower}"
                )
        for bracket in brackets:
            if bracket.upper <= bracket.lower:
                raise ValueError(f"Tax bracket upper bound must exceed lower bound: {bracket}")
        if brackets[-1].upper != float('inf'):
            raise ValueError("Top tax bracket must be unbounded")


@dataclass(frozen=True)
class TaxParameters:
    """Immutable parameter table for a single tax year."""
    year: int
    filing_status: Mapping[FilingStatus, FilingStatusParams]

    def __post_init__(self):
        missing = [status.value for status in FilingStatus if status not in self.filing_status]
        if missing:
            raise ValueError(f"Tax parameters for {self.year} missing filing status: {', '.join(missing)}")
        object.__setattr__(self, 'filing_status', MappingProxyType(dict(self.filing_status)))

    def for_status(self, status: FilingStatusLike) -> FilingStatusParams:
        """Resolve the parameters for a filing status (enum member or its value)."""
        return self.filing_status[FilingStatus(status)]


@dataclass(frozen=True)
class TaxInput:
    """A single tax scenario: income, deductions and the ISO exercise."""
    ordinary_income: float
    itemized_deductions: float
    filing_status: FilingStatusLike
    iso_strike: float
    iso_fmv: float
    shares_exercised: int
    other_amt_adjustments: float = 0.0


@dataclass(frozen=True)
class TaxResult:
    """Full regular tax and AMT breakdown for one scenario."""
    # Regular tax
    regular_taxable_income: float
    regular_tax: float

    # AMT
    amt_income: float
    amt_exemption_amount: float
    amt_taxable_income: float
    tentative_minimum_tax: float
    amt_owed: float

    # Final
    total_tax_owed: float
    bargain_element: float
    effective_tax_rate: float


@dataclass(frozen=True)
class OptimizationInput:
    """Inputs for finding the most shares exercisable within an AMT budget."""
    ordinary_income: float
    itemized_deductions: float
    filing_status: FilingStatusLike
    iso_strike: float
    iso_fmv: float
    total_shares_available: int
    target_amt_budget: float

    def to_tax_input(self, shares_exercised: int) -> TaxInput:
        """Build the calculator input for exercising a given number of shares."""
        return TaxInput(
            ordinary_income=self.ordinary_income,
            itemized_deductions=self.itemized_deductions,
            filing_status=self.filing_status,
            iso_strike=self.iso_strike,
            iso_fmv=self.iso_fmv,
            shares_exercised=shares_exercised,
        )


@dataclass(frozen=True)
class OptimizationResult:
    """Best share count found by the optimizer and its tax picture."""
    max_shares: int
    projected_amt: float
    projected_total_tax: float
    bargain_element: float
    utilization_rate: float  # % of AMT budget used
    cash_needed: float
    tax_details: TaxResult


@dataclass(frozen=True)
class TileResult:
    """Exercise scenario at a fixed percentage of available shares."""
    percentage: float
    shares: int
    cash_needed: float
    bargain_element: float
    projected_amt: float
    projected_total_tax: float


@dataclass(frozen=True)
class SensitivityResult:
    """Optimizer outcome at a perturbed fair market value."""
    fmv_adjustment: float
    fmv: float
    max_shares: int
    projected_amt: float


@dataclass(frozen=True)
class CompleteOptimizationResult:
    """Optimal plan plus canonical tiles and FMV sensitivity."""
    optimal: OptimizationResult
    tile25: TileResult
    tile50: TileResult
    tile100: TileResult
    down: Optional[SensitivityResult] = None
    up: Optional[SensitivityResult] = None

    @property
    def max_shares(self) -> int:
        return self.optimal.max_shares

    @property
    def projected_amt(self) -> float:
        return self.optimal.projected_amt

    @property
    def projected_total_tax(self) -> float:
        return self.optimal.projected_total_tax

    @property
    def bargain_element(self) -> float:
        return self.optimal.bargain_element

    @property
    def utilization_rate(self) -> float:
        return self.optimal.utilization_rate

    @property
    def cash_needed(self) -> float:
        return self.optimal.cash_needed

    @property
    def tax_details(self) -> TaxResult:
        return self.optimal.tax_details

    @property
    def tiles(self) -> Tuple[TileResult, TileResult, TileResult]:
        return (self.tile25, self.tile50, self.tile100)
