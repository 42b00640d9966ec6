"""Tests for the required interest rate solver."""

import pytest

from planning import InvalidPlanError, required_interest_rate


class TestRequiredInterestRate:
    def test_lump_sum_doubling(self):
        # 1000 doubling in 10 periods needs 2^(1/10) - 1 per period
        rate = required_interest_rate(1000, 0, 2000, 10)
        assert rate == pytest.approx((2 ** 0.1 - 1) * 100, abs=1e-4)

    def test_periodic_only(self):
        target = 100 * ((1.05 ** 10 - 1) / 0.05)
        rate = required_interest_rate(0, 100, target, 10)
        assert rate == pytest.approx(5.0, abs=1e-4)

    def test_mixed_contributions(self):
        r = 0.03
        growth = (1 + r) ** 24
        target = 5000 * growth + 200 * (growth - 1) / r
        assert required_interest_rate(5000, 200, target, 24) == pytest.approx(3.0, abs=1e-4)

    def test_contributions_already_reach_target(self):
        with pytest.raises(InvalidPlanError):
            required_interest_rate(1000, 100, 2000, 10)

    def test_requires_a_period(self):
        with pytest.raises(InvalidPlanError):
            required_interest_rate(1000, 100, 5000, 0)
