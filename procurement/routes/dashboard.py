# ==== DASHBOARD API ROUTES MODULE ==== #

"""
Dashboard summary endpoint.

Headline purchase order and invoice figures plus the latest purchase
orders, read straight from the database on every request.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from procurement.observability.logging import ContextualLogger
from procurement.observability.tracing import get_tracer
from procurement.schemas.dashboard import DashboardStatsResponse
from procurement.storage import repositories
from procurement.storage.db import get_db_session


logger = ContextualLogger(__name__)
tracer = get_tracer(__name__)
router = APIRouter()


@router.get("/stats", response_model=DashboardStatsResponse)
async def get_dashboard_stats(
    db: AsyncSession = Depends(get_db_session)
) -> DashboardStatsResponse:
    """
    Get procurement dashboard figures.

    Returns:
        DashboardStatsResponse: PO count and total value, paid and pending
        invoice counts, and the five most recent purchase orders
    """
    with tracer.start_as_current_span("dashboard_stats") as span:
        stats = await repositories.dashboard_stats(db)
        span.set_attribute("total_po", stats["total_po"])

        logger.debug(
            "Dashboard stats computed",
            total_po=stats["total_po"],
            recent=len(stats["recent_pos"])
        )
        return DashboardStatsResponse.model_validate(stats)
