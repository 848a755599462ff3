"""Vehicle schemas for API validation."""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel

from app.models.vehicle import VehicleStatusType


class VehicleResponse(BaseModel):
    id: str
    plate_number: str
    brand: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None

    class Config:
        from_attributes = True


class VehicleListResponse(BaseModel):
    """Schema for paginated vehicle list response."""
    items: List[VehicleResponse]
    total: int
    page: int
    page_size: int


class VehicleStatusResponse(BaseModel):
    """Recorded or derived status of a vehicle for one day."""
    id: str
    vehicle_id: str
    date: date
    status: VehicleStatusType
    odometer: Optional[int] = None
    derived: bool = False
    note: Optional[str] = None
