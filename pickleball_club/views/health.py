from __future__ import annotations

from fastapi import APIRouter, status

from pickleball_club.dependencies import AppContext, AppDatasource, ClubSettings
from pickleball_club.models.health import ClubSummary, HealthResponse


router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK, response_model=HealthResponse)
async def health_endpoint(
    context: AppContext,
    datasource: AppDatasource,
    club_settings: ClubSettings,
) -> HealthResponse:
    """HTTP endpoint reporting the built components and datasource reachability."""
    datasource_up = datasource.is_available()
    return HealthResponse(
        status="ok" if datasource_up else "degraded",
        profile=context.profile,
        components=context.names,
        datasource="up" if datasource_up else "down",
        club=ClubSummary(**club_settings.describe()),
    )
