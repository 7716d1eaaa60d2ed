import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from marketwatch.db import init_db
from marketwatch.errors import AuthenticationError
from marketwatch.settings import get_settings

from marketwatch.api.routes.health import router as health_router
from marketwatch.api.routes.refresh_market_data import CORS_HEADERS, router as refresh_router
from marketwatch.api.routes.market_data import router as market_data_router
from marketwatch.api.routes.alert_thresholds import router as alert_thresholds_router
from marketwatch.api.routes.notifications import router as notifications_router
from marketwatch.api.routes.portfolios import router as portfolios_router
from marketwatch.api.routes.audit_logs import router as audit_logs_router
from marketwatch.api.routes.messages import router as messages_router
from marketwatch.api.routes.advisor_clients import router as advisor_clients_router
from marketwatch.api.routes.stock_symbols import router as stock_symbols_router


logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(_app: FastAPI):
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    if not settings.alpha_vantage_api_key:
        logger.warning("ALPHA_VANTAGE_API_KEY is not set; refresh runs will update nothing")
    # Fail fast if DB unreachable + ensure tables exist
    init_db()
    yield


app = FastAPI(title="MarketWatch API", version="0.1.0", lifespan=_lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)


@app.exception_handler(AuthenticationError)
def _authentication_error(_request: Request, exc: AuthenticationError) -> JSONResponse:
    return JSONResponse(status_code=401, content={"error": str(exc)}, headers=CORS_HEADERS)


@app.exception_handler(Exception)
def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": str(exc)}, headers=CORS_HEADERS)


app.include_router(health_router)
app.include_router(refresh_router)
app.include_router(market_data_router)
app.include_router(alert_thresholds_router)
app.include_router(notifications_router)
app.include_router(portfolios_router)
app.include_router(audit_logs_router)
app.include_router(messages_router)
app.include_router(advisor_clients_router)
app.include_router(stock_symbols_router)
