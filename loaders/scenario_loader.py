"""
Scenario loader for ISO exercise planning inputs.

Loads a JSON scenario file and validates it into an OptimizationInput ready
for the optimizer. A personal scenario (data/user_scenario.json, git-ignored)
is preferred; the committed demo scenario is used when it is absent.

Scenario file format:
    {
        "tax_year": 2025,
        "filing_status": "single",
        "ordinary_income": 180000,
        "itemized_deductions": 0,
        "iso_strike": 0.50,
        "iso_fmv": 25.00,
        "total_shares_available": 20000,
        "target_amt_budget": 15000
    }
"""

import json
import math
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from calculators.components import FilingStatus, OptimizationInput
from calculators.tax_constants import DEFAULT_TAX_YEAR, SUPPORTED_TAX_YEARS


class ScenarioValidationError(ValueError):
    """Scenario data is missing a field or has a value out of range."""


REQUIRED_FIELDS = [
    'ordinary_income',
    'filing_status',
    'iso_strike',
    'iso_fmv',
    'total_shares_available',
    'target_amt_budget',
]

# (minimum, maximum) accepted for each numeric field; None means unbounded
FIELD_RANGES = {
    'ordinary_income': (0, 10_000_000),
    'itemized_deductions': (0, None),
    'iso_strike': (0.01, 10_000),
    'iso_fmv': (0.01, 100_000),
    'total_shares_available': (1, 10_000_000),
    'target_amt_budget': (0, 1_000_000),
}

FILING_STATUS_ALIASES = {
    'single': FilingStatus.SINGLE,
    'married': FilingStatus.MARRIED,
    'married_filing_jointly': FilingStatus.MARRIED,
}


def _parse_number(data: Dict[str, Any], field: str, default: Optional[float] = None) -> float:
    value = data.get(field, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ScenarioValidationError(f"Scenario field '{field}' must be a number, got {value!r}")
    # json.load accepts NaN and Infinity, and NaN compares False against any bound
    if not math.isfinite(value):
        raise ScenarioValidationError(f"Scenario field '{field}' must be a finite number, got {value!r}")

    minimum, maximum = FIELD_RANGES[field]
    if value < minimum:
        raise ScenarioValidationError(f"Scenario field '{field}' must be at least {minimum:,}, got {value:,}")
    if maximum is not None and value > maximum:
        raise ScenarioValidationError(f"Scenario field '{field}' seems unusually high: {value:,} (max {maximum:,})")
    return value


def _parse_filing_status(value: Any) -> FilingStatus:
    if isinstance(value, FilingStatus):
        return value
    status = FILING_STATUS_ALIASES.get(str(value).strip().lower())
    if status is None:
        options = ', '.join(sorted(FILING_STATUS_ALIASES))
        raise ScenarioValidationError(f"Unknown filing status: {value!r}. Expected one of: {options}")
    return status


def parse_scenario(data: Dict[str, Any]) -> Tuple[OptimizationInput, int]:
    """
    Validate raw scenario data into an OptimizationInput.

    Strike price below FMV is not checked here; the optimizer enforces it.

    Args:
        data: Scenario dictionary (e.g. parsed from JSON)

    Returns:
        Tuple of (OptimizationInput, tax_year)

    Raises:
        ScenarioValidationError: If a field is missing or out of range
    """
    if not isinstance(data, dict):
        raise ScenarioValidationError("Scenario must be a JSON object")

    for field in REQUIRED_FIELDS:
        if field not in data:
            raise ScenarioValidationError(f"Scenario missing required field '{field}'")

    shares = _parse_number(data, 'total_shares_available')
    if isinstance(shares, float) and not shares.is_integer():
        raise ScenarioValidationError(f"Scenario field 'total_shares_available' must be a whole number, got {shares}")

    tax_year = data.get('tax_year', DEFAULT_TAX_YEAR)
    if tax_year not in SUPPORTED_TAX_YEARS:
        supported = ', '.join(str(y) for y in SUPPORTED_TAX_YEARS)
        raise ScenarioValidationError(f"Tax year {tax_year!r} not supported. Supported years: {supported}")

    opt_input = OptimizationInput(
        ordinary_income=_parse_number(data, 'ordinary_income'),
        itemized_deductions=_parse_number(data, 'itemized_deductions', default=0),
        filing_status=_parse_filing_status(data['filing_status']),
        iso_strike=_parse_number(data, 'iso_strike'),
        iso_fmv=_parse_number(data, 'iso_fmv'),
        total_shares_available=int(shares),
        target_amt_budget=_parse_number(data, 'target_amt_budget'),
    )
    return opt_input, tax_year


class ScenarioLoader:
    """Scenario loader with automatic fallback to the demo scenario."""

    # Standard scenario file paths relative to project root
    USER_SCENARIO_PATH = "data/user_scenario.json"
    DEMO_SCENARIO_PATH = "data/demo_scenario.json"

    def __init__(self, project_root: str = None):
        """Initialize scenario loader.

        Args:
            project_root: Path to project root directory. If None, auto-detects.
        """
        if project_root is None:
            # Assumes this file is in the loaders/ subdirectory
            self.project_root = Path(__file__).parent.parent
        else:
            self.project_root = Path(project_root)

    def load_scenario(
        self,
        scenario_path: str = None,
        verbose: bool = True,
        force_demo: bool = False
    ) -> Tuple[OptimizationInput, int, bool]:
        """Load and validate a scenario.

        Args:
            scenario_path: Explicit scenario file. Skips the user/demo fallback.
            verbose: Whether to print status messages
            force_demo: If True, use the demo scenario even if a user scenario exists

        Returns:
            Tuple of (optimization_input, tax_year, is_real_data)

        Raises:
            FileNotFoundError: If the requested (or fallback) file does not exist
            ScenarioValidationError: If the file is not valid JSON or fails validation
        """
        if scenario_path is not None:
            path = Path(scenario_path)
            if not path.exists():
                raise FileNotFoundError(f"Scenario file not found: {path}")
            if verbose:
                print(f"📄 Using scenario from {path}")
            opt_input, tax_year = self._load_file(path)
            return opt_input, tax_year, True

        if not force_demo:
            user_path = self.project_root / self.USER_SCENARIO_PATH
            if user_path.exists():
                opt_input, tax_year = self._load_file(user_path)
                if verbose:
                    print("🔒 Using personal scenario from user_scenario.json")
                return opt_input, tax_year, True

        demo_path = self.project_root / self.DEMO_SCENARIO_PATH
        if not demo_path.exists():
            raise FileNotFoundError(
                f"Neither {self.USER_SCENARIO_PATH} nor {self.DEMO_SCENARIO_PATH} found. "
                f"Copy {self.DEMO_SCENARIO_PATH} to {self.USER_SCENARIO_PATH} and fill in your numbers."
            )

        opt_input, tax_year = self._load_file(demo_path)
        if verbose:
            print("🧪 Using demo scenario from demo_scenario.json")
            print(f"   To use your own numbers: copy it to {self.USER_SCENARIO_PATH}")
        return opt_input, tax_year, False

    def _load_file(self, file_path: Path) -> Tuple[OptimizationInput, int]:
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ScenarioValidationError(f"Invalid JSON in {file_path}: {e}") from e
        except UnicodeDecodeError as e:
            raise ScenarioValidationError(f"Scenario file {file_path} is not UTF-8 text: {e}") from e
        return parse_scenario(data)


def load_scenario(
    scenario_path: str = None,
    project_root: str = None,
    verbose: bool = True,
    force_demo: bool = False
) -> Tuple[OptimizationInput, int, bool]:
    """Convenience function to load a scenario with fallback.

    Returns:
        Tuple of (optimization_input, tax_year, is_real_data)
    """
    loader = ScenarioLoader(project_root)
    return loader.load_scenario(scenario_path=scenario_path, verbose=verbose, force_demo=force_demo)
