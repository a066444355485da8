# Parking Registry — Database Models
# Import all models here for SQLAlchemy discovery

from parking_registry.models.vehicle_record import VehicleRecord   # noqa
