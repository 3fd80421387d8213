"""Dependency functions for FastAPI routes."""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from pickleball_club.container import ApplicationContext
from pickleball_club.database import Datasource
from pickleball_club.services import ClubSettingsService


_logger = logging.getLogger(__name__)


def get_context(request: Request) -> ApplicationContext:
    """Return the application context built by the app factory.

    Raises:
        HTTPException 503: If the context is missing or already closed
    """
    context = getattr(request.app.state, "context", None)
    if context is None or context.closed:
        _logger.error("Request received without an open application context")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Application context is not available",
        )
    return context


def get_datasource(context: ApplicationContext = Depends(get_context)) -> Datasource:
    return context.get("datasource")


def get_club_settings_service(context: ApplicationContext = Depends(get_context)) -> ClubSettingsService:
    return context.get("club_settings_service")


# Type aliases for cleaner dependency injection
AppContext = Annotated[ApplicationContext, Depends(get_context)]
AppDatasource = Annotated[Datasource, Depends(get_datasource)]
ClubSettings = Annotated[ClubSettingsService, Depends(get_club_settings_service)]
