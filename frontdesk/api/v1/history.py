"""
History endpoints (administrators only).
"""

from datetime import date
from typing import List, Optional

import pydantic
from fastapi import APIRouter, Depends, Query

from frontdesk.api import deps
from frontdesk.api.errors import unwrap_result
from frontdesk.core.exceptions import ValidationError
from frontdesk.models.user import User
from frontdesk.schemas.common import SuccessResponse
from frontdesk.schemas.history import HistoryFilter, HistoryRead, HistoryStats, MonthlyHistory
from frontdesk.services.history import HistoryService
from frontdesk.utils.date_utils import today

router = APIRouter(prefix="/history", tags=["History"])


def history_filters(
    room_id: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    guest_name: Optional[str] = Query(default=None, description="Matches either guest"),
    company: Optional[str] = None,
    limit: Optional[int] = Query(default=None, ge=1, le=10000),
) -> HistoryFilter:
    try:
        return HistoryFilter(
            room_id=room_id,
            date_from=date_from,
            date_to=date_to,
            guest_name=guest_name,
            company=company,
            limit=limit,
        )
    except pydantic.ValidationError as e:
        raise ValidationError(e.errors()[0]["msg"], field="date_to") from e


@router.get("", response_model=SuccessResponse[List[HistoryRead]])
def get_history(
    filters: HistoryFilter = Depends(history_filters),
    service: HistoryService = Depends(deps.get_history_service),
    _: User = Depends(deps.get_admin_user),
):
    return SuccessResponse(data=unwrap_result(service.get_history(filters)))


@router.get("/stats", response_model=SuccessResponse[HistoryStats])
def history_stats(
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    service: HistoryService = Depends(deps.get_history_service),
    _: User = Depends(deps.get_admin_user),
):
    return SuccessResponse(data=unwrap_result(service.history_stats(date_from, date_to)))


@router.get("/monthly", response_model=SuccessResponse[List[MonthlyHistory]])
def monthly_history(
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    filters: HistoryFilter = Depends(history_filters),
    service: HistoryService = Depends(deps.get_history_service),
    _: User = Depends(deps.get_admin_user),
):
    """History of a year grouped by check-in month, newest month first."""
    result = service.monthly_history(year or today().year, filters)
    return SuccessResponse(data=unwrap_result(result))
