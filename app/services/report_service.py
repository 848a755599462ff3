"""Trip report export to .xlsx."""

import io
import logging
from datetime import date, datetime
from typing import Any, List, Optional, Sequence

from openpyxl import Workbook
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import ValidationError
from app.models.trip import Trip
from app.services.vehicle_service import day_bounds

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
SHEET_TITLE = "Trips"
HEADER = [
    "Trip ID",
    "Vehicle",
    "Driver",
    "Start Time",
    "End Time",
    "Distance (km)",
    "From",
    "To",
]
MISSING = "-"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"


def report_filename(from_date: date, to_date: date) -> str:
    return f"trips_{from_date.isoformat()}_{to_date.isoformat()}.xlsx"


def _fmt_time(value: Optional[datetime]) -> str:
    return value.strftime(TIMESTAMP_FORMAT) if value else MISSING


def _or_missing(value: Any) -> Any:
    return MISSING if value is None or value == "" else value


def trip_row(trip: Trip) -> List[Any]:
    return [
        trip.id,
        trip.vehicle.plate_number if trip.vehicle else MISSING,
        trip.user.email if trip.user else MISSING,
        _fmt_time(trip.start_time),
        _fmt_time(trip.end_time),
        _or_missing(trip.distance_km),
        _or_missing(trip.start_place),
        _or_missing(trip.end_place),
    ]


def encode_workbook(rows: Sequence[Sequence[Any]], title: str = SHEET_TITLE) -> bytes:
    """Write header + data rows to a single-sheet workbook and return its bytes."""
    wb = Workbook()
    ws = wb.active
    ws.title = title
    for row in rows:
        ws.append(list(row))

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


class ReportService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def fetch_trips(self, from_date: date, to_date: date) -> Sequence[Trip]:
        """
        Completed trips contained in [from_date, to_date], both days inclusive.

        A trip must start on or after ``from_date`` 00:00 UTC and end before the
        day after ``to_date``. Trips still in progress have no end time and are
        left out.
        """
        if from_date > to_date:
            raise ValidationError("'from' must not be after 'to'", field="from")

        start, _ = day_bounds(from_date)
        _, end = day_bounds(to_date)

        result = await self.db.execute(
            select(Trip)
            .where(
                Trip.start_time >= start,
                Trip.end_time.is_not(None),
                Trip.end_time < end,
            )
            .options(selectinload(Trip.vehicle), selectinload(Trip.user))
            .order_by(Trip.start_time, Trip.id)
        )
        return result.scalars().all()

    async def build_trip_rows(self, from_date: date, to_date: date) -> List[List[Any]]:
        trips = await self.fetch_trips(from_date, to_date)
        return [list(HEADER)] + [trip_row(trip) for trip in trips]

    async def build_trips_workbook(self, from_date: date, to_date: date) -> bytes:
        rows = await self.build_trip_rows(from_date, to_date)
        logger.info(f"Trip report {from_date}..{to_date}: {len(rows) - 1} trips")
        return encode_workbook(rows)
