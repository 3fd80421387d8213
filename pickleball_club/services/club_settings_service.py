"""Service layer for club identity and booking policy."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

from pickleball_club.config import ClubPolicySettings, Settings


class ClubSettingsService:
    """Read-only view of the club's configured identity and policy."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    @property
    def club_name(self) -> str:
        return self._settings.club_name

    @property
    def timezone(self) -> ZoneInfo:
        return ZoneInfo(self._settings.club_timezone)

    @property
    def currency(self) -> str:
        return self._settings.club_currency

    @property
    def policy(self) -> ClubPolicySettings:
        return self._settings.policy

    def booking_horizon(self, today: date) -> date:
        """Return the last day a court can currently be booked for.

        Args:
            today: The current date in the club's timezone

        Returns:
            ``today`` plus the configured advance booking window
        """
        return today + timedelta(days=self.policy.booking_advance_days)

    def can_book(self, day: date, today: date) -> bool:
        """Check whether ``day`` falls inside the booking window."""
        return today <= day <= self.booking_horizon(today)

    def can_cancel(self, starts_at: datetime, now: datetime) -> bool:
        """Check whether a booking starting at ``starts_at`` may still be cancelled.

        Naive datetimes are taken to be in the club's timezone.

        Args:
            starts_at: Start of the booking
            now: Current time

        Returns:
            True if at least ``cancellation_hours`` remain before the start
        """
        # Same-tzinfo subtraction is wall-clock time; compare in UTC so DST shifts count
        remaining = self._localize(starts_at).astimezone(UTC) - self._localize(now).astimezone(UTC)
        return remaining >= timedelta(hours=self.policy.cancellation_hours)

    def can_book_more(self, active_bookings: int) -> bool:
        """Check whether a member holding ``active_bookings`` may book another court."""
        return active_bookings < self.policy.max_bookings_per_user

    def release_deadline(self, starts_at: datetime) -> datetime:
        """Return when an unclaimed booking starting at ``starts_at`` is released."""
        released = self._localize(starts_at).astimezone(UTC) + timedelta(minutes=self.policy.auto_release_minutes)
        return released.astimezone(self.timezone)

    def slot_length(self) -> timedelta:
        """Court time a single match occupies, including the maintenance buffer."""
        return timedelta(minutes=self.policy.match_duration_minutes + self.policy.court_maintenance_buffer)

    def describe(self) -> dict:
        return {
            "name": self.club_name,
            "timezone": self._settings.club_timezone,
            "currency": self.currency,
            "booking_advance_days": self.policy.booking_advance_days,
            "cancellation_hours": self.policy.cancellation_hours,
            "max_bookings_per_user": self.policy.max_bookings_per_user,
            "auto_release_minutes": self.policy.auto_release_minutes,
            "slot_minutes": int(self.slot_length().total_seconds() // 60),
        }

    def _localize(self, moment: datetime) -> datetime:
        if moment.tzinfo is None:
            return moment.replace(tzinfo=self.timezone)
        return moment
