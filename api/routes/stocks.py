"""
Stock lookup routes.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Query, status
from pydantic import BaseModel

from ..errors import GENERIC_ERROR, error_response
from ..services import get_services
from market_data import SymbolNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter()


class SymbolMatchModel(BaseModel):
    symbol: str
    shortName: Optional[str] = None
    exchange: Optional[str] = None
    type: Optional[str] = None


class SymbolSearchResponse(BaseModel):
    matches: List[SymbolMatchModel]


@router.get("/stocks/search", response_model=SymbolSearchResponse)
async def search_symbol(q: str = Query(..., min_length=1, max_length=64)):
    """Look up ticker symbols by company name or keyword."""
    services = get_services()
    if services.market_data is None:
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR)

    try:
        matches = await services.market_data.search_symbol(q)
    except SymbolNotFoundError:
        return error_response(status.HTTP_404_NOT_FOUND, f"No symbols found for '{q}'.")
    except Exception as e:
        logger.error(f"Symbol search failed for {q}: {e}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR)

    return SymbolSearchResponse(matches=[SymbolMatchModel(**m.to_dict()) for m in matches])
