"""
CLI entry point: analyze one code and print the result as JSON.

This script is the Composition Root for command-line runs:

    python -m src.infrastructure.entrypoints.analyze_cli 600519
    python -m src.infrastructure.entrypoints.analyze_cli 510300 --principal 50000 --reinvest
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Optional

from dotenv import load_dotenv

from src.domain.errors import StockAnalysisError
from src.infrastructure.entrypoints.schemas import AnalysisResponse, SimulationOut
from src.infrastructure.entrypoints.use_case_registry import create_use_cases
from src.infrastructure.stock_data.eastmoney_http import DEFAULT_TIMEOUT_SECONDS, create_http_client


async def _run(symbol: str, principal: Optional[float], reinvest: bool) -> dict:
    timeout = float(os.environ.get("EASTMONEY_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS))
    async with create_http_client(timeout) as client:
        use_cases = create_use_cases(client)
        if principal is None:
            analysis = await use_cases.analyze.execute(symbol)
            return AnalysisResponse.model_validate(analysis).to_json()
        analysis, simulation = await use_cases.simulate.execute(symbol, principal, reinvest)
        out = AnalysisResponse.model_validate(analysis).to_json()
        out["simulation"] = SimulationOut.model_validate(simulation).to_json() if simulation else None
        return out


def main(argv: Optional[list[str]] = None) -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Dividend & growth analysis for an A-share code.")
    parser.add_argument("symbol", help="6-digit code, e.g. 600519")
    parser.add_argument("--principal", type=float, default=None, help="also simulate investing this amount")
    parser.add_argument("--reinvest", action="store_true", help="reinvest dividends in the simulation")
    args = parser.parse_args(argv)

    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "WARNING").upper())
    try:
        result = asyncio.run(_run(args.symbol, args.principal, args.reinvest))
    except StockAnalysisError as exc:
        print(json.dumps({"symbol": args.symbol, "error": str(exc)}, ensure_ascii=False))
        return 1
    print(json.dumps(result, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
