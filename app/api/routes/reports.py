"""Report export endpoints."""

from datetime import date
from urllib.parse import quote

from fastapi import APIRouter, Query
from fastapi.responses import Response

from app.core.dependencies import CurrentUser, ReportServiceDep
from app.services.report_service import XLSX_MEDIA_TYPE, report_filename

router = APIRouter()


@router.get(
    "/trips.xlsx",
    response_class=Response,
    responses={200: {"content": {XLSX_MEDIA_TYPE: {}}, "description": "Excel file"}},
)
async def export_trips(
    reports: ReportServiceDep,
    current_user: CurrentUser,
    from_date: date = Query(..., alias="from", description="Start date (YYYY-MM-DD)"),
    to_date: date = Query(..., alias="to", description="End date (YYYY-MM-DD), inclusive"),
):
    """Completed trips between two days as an .xlsx attachment."""
    content = await reports.build_trips_workbook(from_date, to_date)
    filename = report_filename(from_date, to_date)

    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={
            "Content-Disposition": f"attachment; filename=\"{filename}\"; filename*=UTF-8''{quote(filename)}",
            "Access-Control-Expose-Headers": "Content-Disposition",
            "Cache-Control": "no-store",
        },
    )
