# parking_registry/schemas/statistics.py
from pydantic import BaseModel, computed_field
from pydantic.alias_generators import to_camel

from parking_registry.schemas.vehicle_record import VehicleRecordOut


class StatisticsOut(BaseModel):
    total_vehicles: int
    vehicles_inside: int
    vehicles_outside: int
    by_kind: dict[str, int]
    oldest_inside: list[VehicleRecordOut]
    capacity: int
    available_spaces: int
    occupancy_percent: int

    # Inside count under its Spanish name, which existing dashboards read
    @computed_field(alias="vehiculosDentro")
    @property
    def vehiculos_dentro(self) -> int:
        return self.vehicles_inside

    class Config:
        alias_generator = to_camel
        populate_by_name = True
