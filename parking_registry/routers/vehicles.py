# parking_registry/routers/vehicles.py
"""Vehicle visits — entry, exit, edit, delete, listing and per-plate history."""

from typing import Optional

from fastapi import APIRouter, Depends, status

from parking_registry.errors import ValidationError
from parking_registry.schemas.envelope import success
from parking_registry.schemas.vehicle_record import VehicleEntryIn, VehicleRecordOut, VehicleUpdateIn
from parking_registry.database import get_registry
from parking_registry.services.registry_service import RegistryService
from parking_registry.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


def _out(record) -> VehicleRecordOut:
    return VehicleRecordOut.model_validate(record)


@router.get("/vehiculos", summary="List all vehicle records, newest first")
def list_vehicles(registry: RegistryService = Depends(get_registry)):
    records = [_out(r) for r in registry.list_records()]
    return success("Vehicles retrieved", data=records, total=len(records))


@router.get("/vehiculos/historial/{plate}", summary="Visit history and stats for a plate")
def get_history(plate: str, registry: RegistryService = Depends(get_registry)):
    return success("History retrieved", data=registry.get_history(plate))


@router.get("/vehiculos/{record_id}", summary="Get one vehicle record")
def get_vehicle(record_id: int, registry: RegistryService = Depends(get_registry)):
    return success("Vehicle found", data=_out(registry.get_record(record_id)))


@router.post("/vehiculos", status_code=status.HTTP_201_CREATED, summary="Register a vehicle entry")
def register_entry(body: VehicleEntryIn, registry: RegistryService = Depends(get_registry)):
    # Fast 400 before touching the store; the service re-checks
    if not (body.plate and body.kind and body.owner):
        raise ValidationError("All fields are required: plate, kind, owner")
    record = registry.register_entry(body.plate, body.kind, body.owner)
    logger.info(f"Entry: plate={record.plate} kind={record.kind} id={record.id}")
    return success("Vehicle registered", data=_out(record))


@router.put("/vehiculos/{record_id}/salida", summary="Register a vehicle exit")
def register_exit(record_id: int, registry: RegistryService = Depends(get_registry)):
    record = registry.register_exit(record_id)
    logger.info(f"Exit: plate={record.plate} id={record.id}")
    return success("Exit registered", data=_out(record))


@router.put("/vehiculos/{record_id}", summary="Edit plate, kind or owner")
def update_vehicle(record_id: int, body: Optional[VehicleUpdateIn] = None,
                   registry: RegistryService = Depends(get_registry)):
    body = body or VehicleUpdateIn()
    record = registry.update_record(record_id, plate=body.plate, kind=body.kind, owner=body.owner)
    logger.info(f"Updated record {record_id}: plate={record.plate} kind={record.kind}")
    return success("Vehicle updated", data=_out(record))


@router.delete("/vehiculos/{record_id}", summary="Permanently delete a record")
def delete_vehicle(record_id: int, registry: RegistryService = Depends(get_registry)):
    record = registry.delete_record(record_id)
    logger.info(f"Deleted record {record_id} (plate={record.plate})")
    return success("Vehicle deleted", data=_out(record))
