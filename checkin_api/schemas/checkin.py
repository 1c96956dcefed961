from pydantic import BaseModel, ConfigDict, Field, field_validator
from uuid import UUID
from datetime import date, datetime
from typing import Optional

from checkin_api.db.models import MAX_ENERGY, MAX_NOTE_LENGTH, MIN_ENERGY, Mood


class CheckInCreate(BaseModel):
    """Every field is optional; an omitted field keeps today's stored value."""
    mood: Optional[Mood] = None
    energyLevel: Optional[int] = Field(default=None, ge=MIN_ENERGY, le=MAX_ENERGY)
    dailyNote: Optional[str] = Field(default=None, max_length=MAX_NOTE_LENGTH)

    @field_validator("mood", mode="before")
    @classmethod
    def _lower_mood(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v

    @field_validator("dailyNote", mode="before")
    @classmethod
    def _trim_note(cls, v):
        return v.strip() if isinstance(v, str) else v


class CheckInOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: UUID
    day: date
    mood: Optional[Mood] = None
    energy_level: Optional[int] = Field(default=None, alias="energyLevel")
    daily_note: str = Field(default="", alias="dailyNote")
    suggestions: list[str] = Field(default_factory=list)
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @field_validator("suggestions", mode="before")
    @classmethod
    def _never_null(cls, v):
        return v or []


class CheckInEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: CheckInOut


class CheckInList(BaseModel):
    success: bool = True
    checkIns: list[CheckInOut]
    total: int
