import logging
from typing import Any, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from checkin_api.core.errors import RepositoryError
from checkin_api.db.models import CheckIn
from checkin_api.services.clock import DayWindow
from checkin_api.utils.time import utcnow

logger = logging.getLogger(__name__)

WRITABLE_FIELDS = ("mood", "energy_level", "daily_note", "suggestions")

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class CheckInRepository:
    """
    Persistence for daily check-ins, one row per reference-timezone day.
    All writes are a single atomic INSERT .. ON CONFLICT (day) DO UPDATE.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    def _insert(self):
        dialect = self.db.get_bind().dialect.name
        try:
            return _UPSERT_DIALECTS[dialect]
        except KeyError:
            raise RepositoryError(f"Upsert not supported for dialect {dialect!r}") from None

    async def upsert_today(self, window: DayWindow, fields: Mapping[str, Any]) -> CheckIn:
        """
        Create or update the row for `window.day`.
        Supplied fields overwrite, omitted fields keep their stored value.
        `suggestions` is written whenever it is supplied, including [].
        """
        unknown = set(fields) - set(WRITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown check-in fields: {sorted(unknown)}")

        now = utcnow()
        updates = {k: v for k, v in fields.items() if v is not None or k == "suggestions"}
        values = {
            "day": window.day,
            "daily_note": "",
            "suggestions": [],
            "created_at": now,
            "updated_at": now,
            **updates,
        }
        insert = self._insert()
        stmt = (
            insert(CheckIn)
            .values(**values)
            .on_conflict_do_update(
                index_elements=[CheckIn.day],
                set_={**updates, "updated_at": now},
            )
            .returning(CheckIn)
        )
        try:
            result = await self.db.scalars(stmt, execution_options={"populate_existing": True})
            checkin = result.one()
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Failed to upsert check-in for %s: %s", window.day, e)
            raise RepositoryError(f"Failed to save check-in: {e}") from e
        logger.debug("Upserted check-in %s for %s (fields=%s)", checkin.id, window.day, sorted(updates))
        return checkin

    async def find_today(self, window: DayWindow) -> Optional[CheckIn]:
        try:
            res = await self.db.execute(select(CheckIn).where(CheckIn.day == window.day))
            return res.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Failed to load check-in for %s: %s", window.day, e)
            raise RepositoryError(f"Failed to get check-in: {e}") from e

    async def find_by_range(self, start: DayWindow, end: DayWindow) -> list[CheckIn]:
        """Check-ins whose day falls in [start.day, end.day], newest first."""
        stmt = (
            select(CheckIn)
            .where(CheckIn.day >= start.day, CheckIn.day <= end.day)
            .order_by(CheckIn.day.desc())
        )
        try:
            res = await self.db.execute(stmt)
            return list(res.scalars())
        except SQLAlchemyError as e:
            logger.error("Failed to list check-ins %s..%s: %s", start.day, end.day, e)
            raise RepositoryError(f"Failed to list check-ins: {e}") from e
