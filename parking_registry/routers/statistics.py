# parking_registry/routers/statistics.py
"""Occupancy statistics for the whole lot."""

from fastapi import APIRouter, Depends

from parking_registry.schemas.envelope import success
from parking_registry.database import get_registry
from parking_registry.services.registry_service import RegistryService

router = APIRouter()


@router.get("/estadisticas", summary="Counts, per-kind tally, occupancy and longest-parked vehicles")
def get_statistics(registry: RegistryService = Depends(get_registry)):
    return success("Statistics retrieved", data=registry.get_statistics())
