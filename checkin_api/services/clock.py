from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional, Union
from zoneinfo import ZoneInfo

from checkin_api.utils.time import ensure_aware, utcnow

# Last representable millisecond of a day
END_OF_DAY = time(23, 59, 59, 999000)


@dataclass(frozen=True, slots=True)
class DayWindow:
    """
    One calendar day in a reference timezone.
    `start` and `end` are aware datetimes in that zone; `day` is the identity key.
    """
    day: date
    start: datetime
    end: datetime


def _window_for_day(day: date, tz: ZoneInfo) -> DayWindow:
    return DayWindow(
        day=day,
        start=datetime.combine(day, time.min, tzinfo=tz),
        end=datetime.combine(day, END_OF_DAY, tzinfo=tz),
    )


def window_for(value: Union[datetime, date], tz: ZoneInfo) -> DayWindow:
    """
    Day window containing `value` in `tz`.
    - A datetime is converted to `tz` first (naive means UTC).
    - A plain date is taken as that local day.
    """
    if isinstance(value, datetime):
        local_day = ensure_aware(value).astimezone(tz).date()
    else:
        local_day = value
    return _window_for_day(local_day, tz)


def today_window(tz: ZoneInfo, now: Optional[datetime] = None) -> DayWindow:
    return window_for(now or utcnow(), tz)
