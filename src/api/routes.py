"""API routes for the Australian tax calculator."""

import logging
from decimal import Decimal

from fastapi import APIRouter, BackgroundTasks, Query, Request
from pydantic import BaseModel

from src.db.calculation_log import get_calculation_stats, log_calculation
from src.db.models import TaxCalculationRequest, TaxCalculationResult
from src.engine import DEFAULT_HISTORY_YEARS, TaxEngine

logger = logging.getLogger(__name__)

router = APIRouter()


class BracketResponse(BaseModel):
    """A tax bracket as returned by /api/tax/brackets."""

    financial_year: str
    min_income: Decimal
    max_income: Decimal | None = None
    rate: Decimal
    fixed_amount: Decimal
    order: int


def _engine(request: Request) -> TaxEngine:
    return request.app.state.engine


@router.get("/health")
async def health(request: Request) -> dict:  # type: ignore[type-arg]
    """Health check endpoint with optional calculation stats."""
    result: dict[str, object] = {"status": "ok"}
    pool = getattr(request.app.state, "pool", None)
    if pool is not None:
        stats = await get_calculation_stats(pool)
        if stats:
            result["calculation_stats"] = stats
    return result


@router.post("/api/tax/calculate", response_model=TaxCalculationResult)
async def calculate(
    body: TaxCalculationRequest,
    request: Request,
    background_tasks: BackgroundTasks,
) -> TaxCalculationResult:
    """Calculate tax for one financial year."""
    result = await _engine(request).calculate_tax(body)

    pool = getattr(request.app.state, "pool", None)
    if pool is not None:
        background_tasks.add_task(
            log_calculation,
            pool,
            result,
            client_ip=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
        )
    return result


@router.get("/api/tax/years")
async def financial_years(request: Request) -> dict[str, list[str]]:
    """List the financial years with tax rules, newest first."""
    return {"financial_years": await _engine(request).list_financial_years()}


@router.get("/api/tax/brackets/{year}", response_model=list[BracketResponse])
async def brackets(year: str, request: Request) -> list[BracketResponse]:
    """Return the tax brackets for a financial year."""
    rows = await _engine(request).get_tax_brackets(year)
    return [BracketResponse(**b._asdict()) for b in rows]


@router.get("/api/tax/compare", response_model=list[TaxCalculationResult])
async def compare(
    request: Request,
    income: Decimal,
    years: list[str] = Query(...),
    include_medicare_levy: bool = True,
    include_offsets: bool = True,
) -> list[TaxCalculationResult]:
    """Calculate the same income across several financial years."""
    return await _engine(request).compare_tax_across_years(
        income, years, include_medicare_levy, include_offsets
    )


@router.get("/api/tax/history/{income}", response_model=list[TaxCalculationResult])
async def history(
    income: Decimal,
    request: Request,
    years: int = DEFAULT_HISTORY_YEARS,
    include_medicare_levy: bool = True,
    include_offsets: bool = True,
) -> list[TaxCalculationResult]:
    """Calculate an income under the most recent financial years."""
    return await _engine(request).get_tax_history(
        income, years, include_medicare_levy, include_offsets
    )
