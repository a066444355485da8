# parking_registry/services/registry_service.py
"""
Registry Service: every business rule of the parking lot lives here.

  - Entry:  plate format, one "Inside" record per plate, capacity ceiling
  - Exit:   only once per record
  - Edit:   plate/kind/owner only; entry and exit timestamps are immutable
  - Delete: permanent, regardless of status
  - History + statistics derived from the store

The service fails fast with RegistryError subclasses and never logs;
the API layer translates errors to status codes.
"""

import math
import re
from datetime import datetime
from typing import Callable, Optional

from parking_registry.errors import (
    AlreadyExitedError,
    CapacityError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from parking_registry.models.vehicle_record import VehicleRecord, utcnow
from parking_registry.schemas.statistics import StatisticsOut
from parking_registry.schemas.vehicle_record import VehicleHistoryOut, VehicleRecordOut
from parking_registry.store import RecordStore

PLATE_PATTERN = re.compile(r"^[A-Za-z]{3}[0-9]{3}$")
ALWAYS_REPORTED_KINDS = ("Car", "Motorcycle")


def normalize_plate(plate: str) -> str:
    return plate.strip().upper()


def validate_plate(plate: str):
    if not PLATE_PATTERN.match(plate):
        raise ValidationError(
            "Plate must be 3 letters followed by 3 digits (example: ABC123)"
        )


def _clean(value: Optional[str]) -> str:
    return value.strip() if value else ""


class RegistryService:
    def __init__(self, store: RecordStore, capacity: int,
                 clock: Callable[[], datetime] = utcnow):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.store = store
        self.capacity = capacity
        self.clock = clock

    # ── Reads ─────────────────────────────────────────────────────────────
    def list_records(self) -> list[VehicleRecord]:
        return self.store.list_all()

    def get_record(self, record_id: int) -> VehicleRecord:
        record = self.store.get_by_id(record_id)
        if record is None:
            raise NotFoundError("Vehicle not found")
        return record

    def get_history(self, plate: str) -> VehicleHistoryOut:
        plate = normalize_plate(plate or "")
        records = self.store.list_by_plate(plate)
        if not records:
            raise NotFoundError(f"No history found for plate {plate}")

        completed = [r for r in records if r.exit_time is not None]
        total_hours = sum((r.exit_time - r.entry_time).total_seconds() for r in completed) / 3600
        average = round(total_hours / len(completed), 2) if completed else 0.0

        return VehicleHistoryOut(
            plate=plate,
            total_visits=len(records),
            completed_visits=len(completed),
            average_duration_hours=average,
            history=[VehicleRecordOut.model_validate(r) for r in records],
        )

    def get_statistics(self) -> StatisticsOut:
        agg = self.store.aggregate()
        by_kind = {kind: 0 for kind in ALWAYS_REPORTED_KINDS}
        by_kind.update(agg.by_kind)
        return StatisticsOut(
            total_vehicles=agg.total,
            vehicles_inside=agg.inside,
            vehicles_outside=agg.outside,
            by_kind=by_kind,
            oldest_inside=[VehicleRecordOut.model_validate(r) for r in agg.oldest_inside],
            capacity=self.capacity,
            available_spaces=self.capacity - agg.inside,
            # Half-up rounding: 12.5% reports as 13
            occupancy_percent=math.floor(agg.inside * 100 / self.capacity + 0.5),
        )

    # ── Writes ────────────────────────────────────────────────────────────
    def register_entry(self, plate: Optional[str], kind: Optional[str],
                       owner: Optional[str]) -> VehicleRecord:
        plate, kind, owner = _clean(plate), _clean(kind), _clean(owner)
        if not plate or not kind or not owner:
            raise ValidationError("All fields are required: plate, kind, owner")
        validate_plate(plate)
        plate = normalize_plate(plate)

        with self.store.serialized():
            if self.store.find_inside_by_plate(plate) is not None:
                raise ConflictError(f"A vehicle with plate {plate} is already inside the lot")
            inside = self.store.count_inside()
            if inside >= self.capacity:
                raise CapacityError(
                    f"The lot has reached its maximum capacity of {self.capacity} vehicles. "
                    f"Occupied spaces: {inside}/{self.capacity}"
                )
            record_id = self.store.insert(plate=plate, kind=kind, owner=owner,
                                          entry_time=self.clock())
        return self.get_record(record_id)

    def register_exit(self, record_id: int) -> VehicleRecord:
        with self.store.serialized():
            record = self.get_record(record_id)
            if not record.is_inside:
                raise AlreadyExitedError("The vehicle has already left the lot")
            return self.store.set_exit(record_id, self.clock())

    def update_record(self, record_id: int, plate: Optional[str] = None,
                      kind: Optional[str] = None, owner: Optional[str] = None) -> VehicleRecord:
        """Partial edit. Empty or absent fields keep their previous value."""
        with self.store.serialized():
            record = self.get_record(record_id)
            changes = {}

            plate = _clean(plate)
            if plate:
                validate_plate(plate)
                plate = normalize_plate(plate)
                if plate != record.plate and record.is_inside:
                    other = self.store.find_inside_by_plate(plate)
                    if other is not None and other.id != record.id:
                        raise ConflictError(f"A vehicle with plate {plate} is already inside the lot")
                changes["plate"] = plate
            if _clean(kind):
                changes["kind"] = _clean(kind)
            if _clean(owner):
                changes["owner"] = _clean(owner)

            if not changes:
                return record
            return self.store.update(record_id, **changes)

    def delete_record(self, record_id: int) -> VehicleRecord:
        with self.store.serialized():
            record = self.get_record(record_id)
            self.store.delete(record_id)
        return record
