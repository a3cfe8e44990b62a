"""
Statistic Routes.

Scheduled view count synchronization and online visitor counting.
"""

from fastapi import APIRouter
from fastapi.responses import ORJSONResponse

from inkwell.decorators import timed
from inkwell.dependencies import StatisticsDep
from inkwell.schemas import OnlineVisitorResponse, ViewCountSyncResponse

router = APIRouter(prefix="/console/stat", tags=["📈 Statistics"])


@router.get(
    "/viewcnt",
    response_class=ORJSONResponse,
    response_model=ViewCountSyncResponse,
    summary="Synchronize view counts",
    description=(
        "Flush the cached blog view count and up to 30 article hit counts into storage. "
        "Meant to be called periodically by a scheduler."
    ),
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "flushed": True,
                        "sampledKeys": 2,
                        "articles": {"123e4567-e89b-12d3-a456-426614174000": 4},
                    },
                },
            },
        },
        500: {
            "description": "Storage failure; nothing was written",
            "content": {"application/json": {"example": {"detail": "Update failed"}}},
        },
    },
    operation_id="sync_view_counts",
)
@timed("GET /console/stat/viewcnt")
async def sync_view_counts(statistics: StatisticsDep) -> ViewCountSyncResponse:
    """
    Synchronize view counts.

    Parameters
    ----------
    statistics : StatisticsService
        Statistics service.

    Returns
    -------
    ViewCountSyncResponse
        What the run flushed.
    """
    result = await statistics.sync_view_counts()
    return ViewCountSyncResponse(
        flushed=result.flushed,
        sampled_keys=result.sampled_keys,
        articles=result.articles,
    )


@router.get(
    "/onlineVisitorRefresh",
    response_class=ORJSONResponse,
    response_model=OnlineVisitorResponse,
    summary="Count online visitors",
    description="Number of distinct visitors seen within the online window.",
    operation_id="online_visitor_refresh",
)
@timed("GET /console/stat/onlineVisitorRefresh")
async def online_visitor_refresh(statistics: StatisticsDep) -> OnlineVisitorResponse:
    """Count visitors; expired ones have already dropped out of the cache."""
    return OnlineVisitorResponse(online_visitor_count=await statistics.online_visitor_count())
