"""
Required interest rate for a savings plan.

Solves FV = P(1 + r)^n + A((1 + r)^n - 1) / r for the per-period rate r
with Newton-Raphson.
"""

import logging

logger = logging.getLogger(__name__)


class InvalidPlanError(ValueError):
    """The plan already reaches its target without growth, or has no periods."""


def _future_value_gap(r: float, initial: float, periodic: float, final_value: float, n: int) -> float:
    if r == 0:
        return initial + periodic * n - final_value
    growth = (1 + r) ** n
    return initial * growth + periodic * (growth - 1) / r - final_value


def _derivative(r: float, initial: float, periodic: float, n: int) -> float:
    if r == 0:
        # Limit of the annuity term's slope as r -> 0
        return initial * n + periodic * n * (n - 1) / 2
    growth = (1 + r) ** n
    return (
        initial * n * (1 + r) ** (n - 1)
        + periodic * ((n * (1 + r) ** (n - 1) * r - (growth - 1)) / r ** 2)
    )


def required_interest_rate(
    initial: float,
    periodic: float,
    final_value: float,
    periods: int,
    guess: float = 0.05,
    tolerance: float = 1e-6,
    max_iterations: int = 100,
) -> float:
    """
    Per-period rate, in percent, that grows the plan to ``final_value``.

    Args:
        initial: Initial investment
        periodic: Investment added every period
        final_value: Desired value after ``periods``
        periods: Number of periods

    Returns:
        Interest rate in percent

    Raises:
        InvalidPlanError: if the contributions alone reach the target
    """
    if periods < 1:
        raise InvalidPlanError("Number of periods must be at least 1.")
    if initial + periodic * periods >= final_value:
        raise InvalidPlanError(
            "The combined initial and periodic investments must be less than "
            "the desired final value to calculate an interest rate."
        )

    r = guess
    for _ in range(max_iterations):
        slope = _derivative(r, initial, periodic, periods)
        if slope == 0:
            break
        r_next = r - _future_value_gap(r, initial, periodic, final_value, periods) / slope
        if abs(r_next - r) < tolerance:
            return r_next * 100
        r = r_next

    logger.warning(f"Interest rate did not converge after {max_iterations} iterations")
    return r * 100
