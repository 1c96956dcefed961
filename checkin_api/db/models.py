from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import CheckConstraint, Date, DateTime, Enum, Integer, JSON, String, Uuid
import enum
import uuid
from datetime import date, datetime
from typing import List, Optional

from checkin_api.utils.time import utcnow


class Mood(str, enum.Enum):
    AMAZING = "amazing"
    HAPPY = "happy"
    NEUTRAL = "neutral"
    DOWN = "down"
    STRESSED = "stressed"


mood_enum = Enum(
    Mood,
    name="checkin_mood",
    values_callable=lambda members: [m.value for m in members],
)

MIN_ENERGY = 1
MAX_ENERGY = 10
MAX_NOTE_LENGTH = 500


class Base(DeclarativeBase):
    pass


class CheckIn(Base):
    __tablename__ = "check_ins"
    __table_args__ = (
        CheckConstraint(
            f"energy_level IS NULL OR (energy_level >= {MIN_ENERGY} AND energy_level <= {MAX_ENERGY})",
            name="ck_check_ins_energy_level_range",
        ),
    )
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # one row per calendar day in the reference timezone
    day: Mapped[date] = mapped_column(Date, unique=True, index=True)
    mood: Mapped[Optional[Mood]] = mapped_column(mood_enum)
    energy_level: Mapped[Optional[int]] = mapped_column(Integer)
    daily_note: Mapped[str] = mapped_column(String(MAX_NOTE_LENGTH), default="")
    suggestions: Mapped[List[str]] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    def __repr__(self) -> str:
        return f"<CheckIn day={self.day} mood={self.mood} energy={self.energy_level}>"
