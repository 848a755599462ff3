"""Vehicle endpoints."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Query

from app.core.dependencies import CurrentUser, VehicleServiceDep
from app.core.exceptions import NotFound
from app.schemas.vehicle import (
    VehicleListResponse,
    VehicleResponse,
    VehicleStatusResponse,
)
from app.services.vehicle_service import DEFAULT_PAGE_SIZE

router = APIRouter()


@router.get("", response_model=VehicleListResponse)
async def list_vehicles(
    vehicles: VehicleServiceDep,
    current_user: CurrentUser,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    q: Optional[str] = Query(None, description="Search by plate/brand/model (case-insensitive)"),
):
    """
    List vehicles with pagination.

    `page_size` is capped at 100; `total` counts every match of `q`.
    """
    items, total, page, page_size = await vehicles.list(page=page, page_size=page_size, q=q)
    return VehicleListResponse(
        items=[VehicleResponse.model_validate(v) for v in items],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{vehicle_id}", response_model=VehicleResponse)
async def get_vehicle(vehicle_id: str, vehicles: VehicleServiceDep, current_user: CurrentUser):
    vehicle = await vehicles.get(vehicle_id)
    if not vehicle:
        raise NotFound("Vehicle not found")
    return vehicle


@router.get("/{vehicle_id}/status", response_model=VehicleStatusResponse)
async def get_vehicle_status(
    vehicle_id: str,
    vehicles: VehicleServiceDep,
    current_user: CurrentUser,
    day: date = Query(..., alias="date", description="Day to check (YYYY-MM-DD, UTC)"),
):
    """
    Status of a vehicle for one day.

    Returns the recorded status when there is one, otherwise a status derived
    from that day's trips (`derived: true`).
    """
    if not await vehicles.get(vehicle_id):
        raise NotFound("Vehicle not found")

    result = await vehicles.status_by_date(vehicle_id, day)
    return VehicleStatusResponse(**vars(result))
