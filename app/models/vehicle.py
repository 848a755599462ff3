"""Vehicle and per-day vehicle status models."""

import uuid
from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    Date,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.session import Base, utcnow

if TYPE_CHECKING:
    from app.models.trip import Trip


class VehicleStatusType(str, Enum):
    """Operational state of a vehicle on a given day."""
    AVAILABLE = "available"
    IN_USE = "in_use"
    MAINTENANCE = "maintenance"


class Vehicle(Base):
    __tablename__ = "vehicles"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    plate_number: Mapped[str] = mapped_column(String(32), unique=True, index=True)
    brand: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    model: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    statuses: Mapped[List["VehicleStatus"]] = relationship(
        "VehicleStatus",
        back_populates="vehicle",
        cascade="all, delete-orphan",
    )
    trips: Mapped[List["Trip"]] = relationship(
        "Trip",
        back_populates="vehicle",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Vehicle(id={self.id}, plate={self.plate_number})>"


class VehicleStatus(Base):
    """Recorded status of one vehicle for one calendar day (UTC)."""

    __tablename__ = "vehicle_statuses"
    __table_args__ = (
        UniqueConstraint("vehicle_id", "date", name="uq_vehicle_statuses_vehicle_date"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    vehicle_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("vehicles.id", ondelete="CASCADE"),
        index=True,
    )
    day: Mapped[date] = mapped_column("date", Date, index=True)
    status: Mapped[VehicleStatusType] = mapped_column(SQLEnum(VehicleStatusType))
    odometer: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    vehicle: Mapped["Vehicle"] = relationship("Vehicle", back_populates="statuses")

    def __repr__(self) -> str:
        return f"<VehicleStatus(vehicle_id={self.vehicle_id}, day={self.day}, status={self.status})>"
