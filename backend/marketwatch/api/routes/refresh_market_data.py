from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header, Response
from fastapi.responses import JSONResponse

from marketwatch.api.deps import get_refresh_job
from marketwatch.api.schemas.refresh import ErrorResponse, RefreshResponse
from marketwatch.errors import AuthenticationError
from marketwatch.services.refresh_market_data_service import MarketDataRefreshJob


logger = logging.getLogger(__name__)
router = APIRouter(prefix="/functions", tags=["market-data"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


@router.options("/refresh-market-data", include_in_schema=False)
def refresh_market_data_preflight() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


@router.post(
    "/refresh-market-data",
    response_model=RefreshResponse,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def refresh_market_data(
    authorization: str | None = Header(default=None),
    job: MarketDataRefreshJob = Depends(get_refresh_job),
):
    try:
        report = job.refresh(authorization)
    except AuthenticationError:
        # mapped to 401 by the app-level handler
        raise
    except Exception as e:
        logger.exception("Error in refresh-market-data")
        return JSONResponse(status_code=500, content={"error": str(e)}, headers=CORS_HEADERS)

    return RefreshResponse(
        success=True,
        updated=report.updated,
        symbols=report.symbols,
        source=report.source,
        note=report.note,
    )
