"""
Excel export endpoints (administrators only).
"""

import io

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from frontdesk.api import deps
from frontdesk.api.errors import unwrap_result
from frontdesk.models.user import User
from frontdesk.services.export import ExportFile, ExportService

router = APIRouter(prefix="/exports", tags=["Exports"])


def _download(export: ExportFile) -> StreamingResponse:
    return StreamingResponse(
        io.BytesIO(export.content),
        media_type=export.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )


@router.get("/monthly")
def export_monthly(
    year: int = Query(..., ge=2000, le=2100),
    month: int = Query(..., ge=1, le=12),
    service: ExportService = Depends(deps.get_export_service),
    _: User = Depends(deps.get_admin_user),
):
    return _download(unwrap_result(service.export_monthly(year, month)))


@router.get("/yearly")
def export_yearly(
    year: int = Query(..., ge=2000, le=2100),
    service: ExportService = Depends(deps.get_export_service),
    _: User = Depends(deps.get_admin_user),
):
    return _download(unwrap_result(service.export_yearly(year)))


@router.get("/statistics")
def export_statistics(
    year: int = Query(..., ge=2000, le=2100),
    service: ExportService = Depends(deps.get_export_service),
    _: User = Depends(deps.get_admin_user),
):
    return _download(unwrap_result(service.export_statistics(year)))
