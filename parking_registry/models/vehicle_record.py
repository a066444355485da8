# parking_registry/models/vehicle_record.py
"""
Vehicle visit table.
One row per physical visit (not per vehicle): created on entry, closed on exit.
The same plate may have many "Outside" rows but at most one "Inside" row.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime
from parking_registry.database import Base

STATUS_INSIDE = "Inside"
STATUS_OUTSIDE = "Outside"

# Open enumeration: new kinds need no schema change
KNOWN_KINDS = ("Car", "Motorcycle", "Pickup", "Truck", "Bicycle", "Other")


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class VehicleRecord(Base):
    __tablename__ = "vehicle_records"
    __table_args__ = {"sqlite_autoincrement": True}   # ids are never reused after delete

    id = Column(Integer, primary_key=True, autoincrement=True)
    plate = Column(String(10), nullable=False, index=True)
    kind = Column(String(50), nullable=False)
    owner = Column(String(200), nullable=False)
    entry_time = Column(DateTime, nullable=False, index=True)
    exit_time = Column(DateTime)                  # set once, on exit
    status = Column(String(10), nullable=False, default=STATUS_INSIDE, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    @property
    def is_inside(self) -> bool:
        return self.status == STATUS_INSIDE

    def __repr__(self):
        return f"<VehicleRecord {self.id} plate={self.plate} status={self.status}>"
