from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from checkin_api.core.config import Settings
from checkin_api.db.session import get_db
from checkin_api.repositories.checkin_repo import CheckInRepository
from checkin_api.services.ai import SuggestionProvider
from checkin_api.services.checkin import CheckInService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_suggestion_provider(request: Request) -> SuggestionProvider:
    return request.app.state.suggestion_provider


def get_checkin_service(
    db: AsyncSession = Depends(get_db),
    provider: SuggestionProvider = Depends(get_suggestion_provider),
    settings: Settings = Depends(get_app_settings),
) -> CheckInService:
    return CheckInService(CheckInRepository(db), provider, settings.reference_tz)
