"""Vehicle directory and per-day status resolution."""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Sequence, Tuple, Union

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import Conflict
from app.models.trip import Trip
from app.models.vehicle import Vehicle, VehicleStatus, VehicleStatusType

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
DERIVED_ID = "derived"


@dataclass
class StatusResult:
    """Status of a vehicle for one day, either recorded or derived from trips."""
    id: str
    vehicle_id: str
    date: date
    status: VehicleStatusType
    odometer: Optional[int] = None
    derived: bool = False
    note: Optional[str] = None

    @classmethod
    def from_record(cls, record: VehicleStatus) -> "StatusResult":
        return cls(
            id=record.id,
            vehicle_id=record.vehicle_id,
            date=record.day,
            status=record.status,
            odometer=record.odometer,
        )


def to_utc_day(value: Union[date, datetime]) -> date:
    """Calendar day in UTC. Naive datetimes are taken to already be UTC."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """[start, end) of a UTC day as naive datetimes.

    The last representable day ends at ``datetime.max``.
    """
    start = datetime.combine(day, time.min)
    try:
        end = start + timedelta(days=1)
    except OverflowError:
        end = datetime.max
    return start, end


class VehicleService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(
        self,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
        q: Optional[str] = None,
    ) -> Tuple[Sequence[Vehicle], int, int, int]:
        """
        Filter, count, then slice.

        ``q`` matches plate number, brand or model case-insensitively. Returns
        ``(items, total, page, page_size)`` where ``total`` is the filtered
        count and ``page``/``page_size`` are the values actually applied.
        """
        page = max(page, 1)
        page_size = min(max(page_size, 1), MAX_PAGE_SIZE)

        base_query = select(Vehicle)
        count_query = select(func.count(Vehicle.id))

        term = (q or "").strip().lower()
        if term:
            # % and _ in the term match literally
            condition = or_(
                func.lower(Vehicle.plate_number).contains(term, autoescape=True),
                func.lower(func.coalesce(Vehicle.brand, "")).contains(term, autoescape=True),
                func.lower(func.coalesce(Vehicle.model, "")).contains(term, autoescape=True),
            )
            base_query = base_query.where(condition)
            count_query = count_query.where(condition)

        total = (await self.db.execute(count_query)).scalar() or 0

        query = (
            base_query
            .order_by(Vehicle.plate_number)
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await self.db.execute(query)
        return result.scalars().all(), total, page, page_size

    async def get(self, vehicle_id: str) -> Optional[Vehicle]:
        return await self.db.get(Vehicle, vehicle_id)

    async def get_by_plate(self, plate_number: str) -> Optional[Vehicle]:
        result = await self.db.execute(select(Vehicle).where(Vehicle.plate_number == plate_number))
        return result.scalar_one_or_none()

    async def upsert(
        self,
        plate_number: str,
        brand: Optional[str] = None,
        model: Optional[str] = None,
        year: Optional[int] = None,
    ) -> Vehicle:
        """Create the vehicle for ``plate_number`` or update its other fields."""
        vehicle = await self.get_by_plate(plate_number)
        if vehicle is None:
            vehicle = Vehicle(plate_number=plate_number, brand=brand, model=model, year=year)
            self.db.add(vehicle)
            action = "Created"
        else:
            vehicle.brand = brand
            vehicle.model = model
            vehicle.year = year
            action = "Updated"

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise Conflict("Plate number already exists", field="plate_number")

        logger.debug(f"{action} vehicle {plate_number}")
        return vehicle

    async def status_by_date(self, vehicle_id: str, day: Union[date, datetime]) -> StatusResult:
        """
        Recorded status for the UTC day if one exists, otherwise derived:
        any trip starting that day means in_use, none means available.
        The derived result is never persisted.
        """
        day = to_utc_day(day)

        result = await self.db.execute(
            select(VehicleStatus).where(
                VehicleStatus.vehicle_id == vehicle_id,
                VehicleStatus.day == day,
            )
        )
        record = result.scalar_one_or_none()
        if record:
            return StatusResult.from_record(record)

        start, end = day_bounds(day)
        trip_count = (
            await self.db.execute(
                select(func.count(Trip.id)).where(
                    Trip.vehicle_id == vehicle_id,
                    Trip.start_time >= start,
                    Trip.start_time < end,
                )
            )
        ).scalar() or 0

        status = VehicleStatusType.IN_USE if trip_count > 0 else VehicleStatusType.AVAILABLE
        return StatusResult(
            id=DERIVED_ID,
            vehicle_id=vehicle_id,
            date=day,
            status=status,
            odometer=None,
            derived=True,
            note="derived from trips",
        )
