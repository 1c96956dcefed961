"""
Tests for database models.
"""
import pytest
import uuid
from datetime import date
from sqlalchemy.exc import IntegrityError
from checkin_api.db.models import CheckIn, Mood


class TestMood:
    """Test Mood enum."""

    def test_values(self):
        """Test the five accepted moods."""
        assert [m.value for m in Mood] == ["amazing", "happy", "neutral", "down", "stressed"]

    def test_lookup_by_value(self):
        """Test moods resolve from their stored string."""
        assert Mood("stressed") is Mood.STRESSED


class TestCheckInModel:
    """Test CheckIn model."""

    @pytest.mark.asyncio
    async def test_defaults_on_flush(self, db_session):
        """Test id, note, suggestions and timestamps are filled in."""
        ci = CheckIn(day=date(2024, 5, 10))
        db_session.add(ci)
        await db_session.flush()

        assert isinstance(ci.id, uuid.UUID)
        assert ci.daily_note == ""
        assert ci.suggestions == []
        assert ci.created_at is not None
        assert ci.updated_at is not None
        assert ci.mood is None

    @pytest.mark.asyncio
    async def test_energy_level_check_constraint(self, db_session):
        """Test the database rejects energy outside 1..10."""
        db_session.add(CheckIn(day=date(2024, 5, 10), energy_level=11))

        with pytest.raises(IntegrityError):
            await db_session.flush()

    @pytest.mark.asyncio
    async def test_one_row_per_day(self, db_session):
        """Test the day column is unique."""
        db_session.add(CheckIn(day=date(2024, 5, 10), mood=Mood.HAPPY))
        await db_session.flush()
        db_session.add(CheckIn(day=date(2024, 5, 10), mood=Mood.DOWN))

        with pytest.raises(IntegrityError):
            await db_session.flush()

    def test_repr(self):
        """Test repr shows day, mood and energy."""
        ci = CheckIn(day=date(2024, 5, 10), mood=Mood.HAPPY, energy_level=7)

        assert "2024-05-10" in repr(ci)
        assert "energy=7" in repr(ci)
