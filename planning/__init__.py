"""
Financial planning helpers.
"""

from .rate_solver import InvalidPlanError, required_interest_rate

__all__ = ["InvalidPlanError", "required_interest_rate"]
