"""
FastAPI entry point.

This module is the Composition Root for the HTTP service: it creates the shared
httpx.AsyncClient, wires the EastMoney adapters into the use-cases and maps
domain exceptions onto HTTP responses.

Run locally:
    uvicorn src.infrastructure.entrypoints.fastapi_app:app --reload --port 8000
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse

load_dotenv()

from src.domain.errors import InvalidTicker, NoData, UpstreamUnavailable
from src.infrastructure.entrypoints.schemas import (
    AnalysisResponse,
    ErrorResponse,
    SimulationOut,
    SimulationResponse,
)
from src.infrastructure.entrypoints.use_case_registry import UseCases, create_use_cases
from src.infrastructure.stock_data.eastmoney_http import DEFAULT_TIMEOUT_SECONDS, create_http_client

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)

MISSING_SYMBOL_MESSAGE = "Provide a stock code, e.g. symbol=600519 or symbol=000001."


def _error(symbol: str, message: str, status_code: int) -> JSONResponse:
    return JSONResponse(ErrorResponse(symbol=symbol, error=message).to_json(), status_code=status_code)


def _failure_response(symbol: str, exc: Exception) -> JSONResponse:
    """InvalidTicker -> 400, NoData -> 200 with an error field, anything else -> 500."""
    if isinstance(exc, InvalidTicker):
        return _error(symbol, str(exc), 400)
    if isinstance(exc, NoData):
        return _error(symbol, str(exc), 200)
    if isinstance(exc, UpstreamUnavailable):
        log.warning("Upstream unavailable for %s: %s", symbol, exc)
    else:
        log.exception("Analysis failed for %s", symbol)
    return _error(symbol, f"Failed to fetch data: {exc}", 500)


def create_app(use_cases: Optional[UseCases] = None) -> FastAPI:
    """Build the FastAPI app; pass *use_cases* to bypass the default EastMoney wiring."""
    client = None
    if use_cases is None:
        timeout = float(os.environ.get("EASTMONEY_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS))
        client = create_http_client(timeout)
        use_cases = create_use_cases(client)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        if client is not None:
            await client.aclose()

    app = FastAPI(title="A-Share Dividend Analyzer", lifespan=lifespan)

    @app.get("/api/stock")
    async def analyze_stock(symbol: str = Query(default="")):
        """Yearly growth, dividend yield and CAGR for a 6-digit A-share code."""
        symbol = symbol.strip()
        if not symbol:
            return _error(symbol, MISSING_SYMBOL_MESSAGE, 400)
        try:
            result = await use_cases.analyze.execute(symbol)
        except Exception as exc:
            return _failure_response(symbol, exc)
        return AnalysisResponse.model_validate(result).to_json()

    @app.get("/api/simulate")
    async def simulate(
        symbol: str = Query(default=""),
        principal: float = Query(default=100_000.0),
        reinvest: bool = Query(default=False),
    ):
        """Project a buy-and-hold investment of *principal* over the code's history."""
        symbol = symbol.strip()
        if not symbol:
            return _error(symbol, MISSING_SYMBOL_MESSAGE, 400)
        try:
            analysis, simulation = await use_cases.simulate.execute(symbol, principal, reinvest)
        except Exception as exc:
            return _failure_response(symbol, exc)
        if simulation is None:
            return _error(analysis.symbol, "Cannot simulate: no usable purchase price or principal.", 200)
        return SimulationResponse(
            symbol=analysis.symbol,
            name=analysis.name,
            end_date=analysis.end_date,
            simulation=SimulationOut.model_validate(simulation),
        ).to_json()

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
