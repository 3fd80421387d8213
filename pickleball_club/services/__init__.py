"""Service layer for the Pickleball Club backend."""

from pickleball_club.services.club_settings_service import ClubSettingsService

__all__ = ["ClubSettingsService"]
