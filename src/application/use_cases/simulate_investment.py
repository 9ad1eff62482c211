"""
Use-case: run the analysis for a code and project an investment over its yearly series.
Depends only on application services and other use-cases; no infrastructure imports.
"""

from typing import Optional

from src.application.services.investment_simulator import simulate_investment
from src.application.use_cases.analyze_stock import AnalyzeStockUseCase
from src.domain.entities.analysis import AnalysisResult, SimulationResult


class SimulateInvestmentUseCase:
    def __init__(self, analyze: AnalyzeStockUseCase) -> None:
        self._analyze = analyze

    async def execute(
        self,
        symbol: str,
        principal: float,
        reinvest: bool = False,
    ) -> tuple[AnalysisResult, Optional[SimulationResult]]:
        """Return the analysis together with the simulation (None if it cannot run).

        Raises:
            Whatever AnalyzeStockUseCase.execute raises.
        """
        analysis = await self._analyze.execute(symbol)
        simulation = simulate_investment(
            analysis.yearly_records,
            principal=principal,
            reinvest=reinvest,
            end_date=analysis.end_date,
        )
        return analysis, simulation
