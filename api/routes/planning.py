"""
Financial planning routes.
"""

import logging

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from ..errors import error_response
from planning import InvalidPlanError, required_interest_rate

logger = logging.getLogger(__name__)

router = APIRouter()


class InterestRateRequest(BaseModel):
    initial_investment: float = Field(..., ge=0, alias="initialInvestment")
    periodic_investment: float = Field(..., ge=0, alias="periodicInvestment")
    final_value: float = Field(..., gt=0, alias="finalValue")
    number_of_periods: int = Field(..., ge=1, alias="numberOfPeriods")

    class Config:
        populate_by_name = True


class InterestRateResponse(BaseModel):
    interest_rate: float = Field(..., alias="interestRate")
    message: str

    class Config:
        populate_by_name = True


@router.post(
    "/financial-plan/interest-rate",
    response_model=InterestRateResponse,
    response_model_by_alias=True,
)
async def interest_rate(request: InterestRateRequest):
    """
    Required per-period interest rate for a savings plan.

    The result can be passed back as ``interestRate`` on a
    financial-planning chat request.
    """
    try:
        rate = required_interest_rate(
            request.initial_investment,
            request.periodic_investment,
            request.final_value,
            request.number_of_periods,
        )
    except InvalidPlanError as e:
        return error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, str(e))

    return InterestRateResponse(
        interest_rate=rate,
        message=f"Required interest rate: {rate:.2f}% per period.",
    )
