from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any, Callable, Optional, Protocol
from zoneinfo import ZoneInfo

from checkin_api.core.errors import DateRangeError, ProviderError
from checkin_api.db.models import CheckIn, Mood
from checkin_api.repositories.checkin_repo import CheckInRepository
from checkin_api.services.clock import today_window, window_for
from checkin_api.utils.time import utcnow

logger = logging.getLogger(__name__)

MAX_RECENT_DAYS = 366


class Suggester(Protocol):
    async def suggest(self, mood: str, energy_level: int) -> list[str]: ...


class CheckInService:
    """
    Daily check-in orchestration: day bucketing, optional enrichment, persistence.

    Enrichment runs only when a write carries both mood and energy level.
    Provider failures degrade to an empty suggestion list; repository
    failures propagate as RepositoryError.
    """

    def __init__(
        self,
        repository: CheckInRepository,
        provider: Suggester,
        tz: ZoneInfo,
        now: Callable[[], datetime] = utcnow,
    ):
        self.repository = repository
        self.provider = provider
        self.tz = tz
        self.now = now

    async def create_or_update(
        self,
        *,
        mood: Optional[Mood] = None,
        energy_level: Optional[int] = None,
        daily_note: Optional[str] = None,
    ) -> CheckIn:
        window = today_window(self.tz, self.now())

        fields: dict[str, Any] = {}
        if mood is not None:
            fields["mood"] = mood
        if energy_level is not None:
            fields["energy_level"] = energy_level
        if daily_note is not None:
            fields["daily_note"] = daily_note

        # A partial write leaves stored suggestions untouched
        if mood is not None and energy_level is not None:
            fields["suggestions"] = await self._enrich(mood, energy_level)

        return await self.repository.upsert_today(window, fields)

    async def _enrich(self, mood: Mood, energy_level: int) -> list[str]:
        mood_value = mood.value if isinstance(mood, Mood) else str(mood)
        try:
            return await self.provider.suggest(mood_value, energy_level)
        except ProviderError as e:
            logger.warning("Suggestion enrichment failed (%s): %s", e.kind.value, e.message)
            return []

    async def get_today(self) -> Optional[CheckIn]:
        return await self.repository.find_today(today_window(self.tz, self.now()))

    async def list_by_range(self, start_date: date, end_date: date) -> list[CheckIn]:
        """Check-ins from start_date through end_date inclusive, newest first."""
        if start_date > end_date:
            raise DateRangeError("Start date cannot be later than end date")
        return await self.repository.find_by_range(
            window_for(start_date, self.tz),
            window_for(end_date, self.tz),
        )

    async def list_recent(self, days: int) -> list[CheckIn]:
        """The last `days` calendar days up to and including today."""
        if days < 1 or days > MAX_RECENT_DAYS:
            raise ValueError(f"days must be between 1 and {MAX_RECENT_DAYS}")
        today = today_window(self.tz, self.now()).day
        return await self.list_by_range(today - timedelta(days=days - 1), today)
