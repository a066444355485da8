# parking_registry/schemas/vehicle_record.py
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Optional


class VehicleEntryIn(BaseModel):
    # Optional so missing fields reach the router's own 400 check
    plate: Optional[str] = None
    kind: Optional[str] = None
    owner: Optional[str] = None


class VehicleUpdateIn(BaseModel):
    plate: Optional[str] = None
    kind: Optional[str] = None
    owner: Optional[str] = None


class VehicleRecordOut(BaseModel):
    id: int
    plate: str
    kind: str
    owner: str
    entry_time: datetime
    exit_time: Optional[datetime] = None
    status: str          # Inside | Outside
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class VehicleHistoryOut(BaseModel):
    plate: str
    total_visits: int
    completed_visits: int
    average_duration_hours: float
    history: list[VehicleRecordOut]

    class Config:
        alias_generator = to_camel
        populate_by_name = True
