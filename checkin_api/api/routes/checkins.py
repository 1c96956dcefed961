import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from checkin_api.api.deps import get_app_settings, get_checkin_service
from checkin_api.core.config import Settings
from checkin_api.core.errors import DateRangeError, RepositoryError
from checkin_api.schemas.checkin import CheckInCreate, CheckInEnvelope, CheckInList, CheckInOut
from checkin_api.services.checkin import MAX_RECENT_DAYS, CheckInService
from checkin_api.utils.time import parse_iso_date

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/check-in", tags=["check-in"])


def _failure(status_code: int, message: str, error: Optional[Exception] = None) -> HTTPException:
    detail = {"success": False, "message": message}
    if error is not None:
        detail["error"] = str(error)
    return HTTPException(status_code=status_code, detail=detail)


def _listing(checkins) -> CheckInList:
    items = [CheckInOut.model_validate(ci) for ci in checkins]
    return CheckInList(checkIns=items, total=len(items))


@router.post("", response_model=CheckInEnvelope)
async def create_or_update(payload: CheckInCreate, service: CheckInService = Depends(get_checkin_service)):
    try:
        ci = await service.create_or_update(
            mood=payload.mood,
            energy_level=payload.energyLevel,
            daily_note=payload.dailyNote,
        )
    except RepositoryError as e:
        logger.error("Error creating/updating check-in: %s", e)
        raise _failure(500, "Failed to save check-in", e) from e
    return CheckInEnvelope(message="Check-in saved successfully", data=CheckInOut.model_validate(ci))


@router.get("/today", response_model=CheckInEnvelope)
async def get_today(service: CheckInService = Depends(get_checkin_service)):
    try:
        ci = await service.get_today()
    except RepositoryError as e:
        logger.error("Error getting today's check-in: %s", e)
        raise _failure(500, "Failed to get check-in", e) from e
    if not ci:
        raise _failure(404, "No check-in found for today")
    return CheckInEnvelope(data=CheckInOut.model_validate(ci))


@router.get("/recent", response_model=CheckInList)
async def list_recent(
    days: Optional[int] = Query(default=None, ge=1, le=MAX_RECENT_DAYS),
    service: CheckInService = Depends(get_checkin_service),
    settings: Settings = Depends(get_app_settings),
):
    try:
        checkins = await service.list_recent(days or settings.RECENT_DAYS_DEFAULT)
    except RepositoryError as e:
        logger.error("Error listing recent check-ins: %s", e)
        raise _failure(500, "Failed to list check-ins", e) from e
    return _listing(checkins)


@router.get("", response_model=CheckInList)
async def list_by_date_range(
    startDate: Optional[str] = None,
    endDate: Optional[str] = None,
    service: CheckInService = Depends(get_checkin_service),
):
    if not startDate or not endDate:
        raise _failure(400, "Both startDate and endDate query parameters are required")
    try:
        start = parse_iso_date(startDate)
        end = parse_iso_date(endDate)
    except ValueError:
        raise _failure(400, "Invalid date format") from None
    try:
        checkins = await service.list_by_range(start, end)
    except DateRangeError as e:
        raise _failure(400, str(e)) from e
    except RepositoryError as e:
        logger.error("Error listing check-ins by date range: %s", e)
        raise _failure(500, "Failed to list check-ins", e) from e
    return _listing(checkins)
