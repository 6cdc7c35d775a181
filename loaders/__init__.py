"""Loaders for ISO exercise planning scenarios."""

from .scenario_loader import ScenarioLoader, ScenarioValidationError, load_scenario, parse_scenario

__all__ = [
    'ScenarioLoader',
    'ScenarioValidationError',
    'load_scenario',
    'parse_scenario'
]
