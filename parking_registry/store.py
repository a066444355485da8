# parking_registry/store.py
"""
Record Store: single-table persistence for vehicle visits.

Lifecycle is explicit: construct, open(), serve, close(). The store is passed
by reference to the registry service; there is no process-wide instance.

Every write runs under one re-entrant lock. The registry service holds the
same lock (serialized()) across its check-then-insert sequences, so duplicate
plate and capacity checks cannot interleave with another write.
"""

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator, Optional

from sqlalchemy import case, func, inspect, text
from sqlalchemy.orm import Session

from parking_registry.database import Base, build_engine, build_session_factory
from parking_registry.errors import NotFoundError
from parking_registry.models.vehicle_record import STATUS_INSIDE, STATUS_OUTSIDE, VehicleRecord
from parking_registry.utils.logger import get_logger

logger = get_logger(__name__)

OLDEST_INSIDE_LIMIT = 5
MAX_RECORD_ID = 2**63 - 1   # largest signed 64-bit INTEGER the table can hold

EXAMPLE_RECORDS = [
    {"plate": "ABC123", "kind": "Car", "owner": "Juan Pérez",
     "entry_time": datetime(2024, 1, 10, 8, 30), "exit_time": None},
    {"plate": "XYZ789", "kind": "Motorcycle", "owner": "María García",
     "entry_time": datetime(2024, 1, 10, 9, 15), "exit_time": datetime(2024, 1, 10, 17, 30)},
    {"plate": "DEF456", "kind": "Car", "owner": "Carlos López",
     "entry_time": datetime(2024, 1, 10, 10, 0), "exit_time": None},
]


@dataclass
class StoreAggregate:
    total: int
    inside: int
    outside: int
    by_kind: dict[str, int] = field(default_factory=dict)
    oldest_inside: list[VehicleRecord] = field(default_factory=list)


class RecordStore:
    def __init__(self, database_url: str, seed_example_data: bool = False):
        self.database_url = database_url
        self.seed_example_data = seed_example_data
        self.engine = None
        self._session_factory = None
        self._lock = threading.RLock()

    # ── Lifecycle ─────────────────────────────────────────────────────────
    def open(self) -> "RecordStore":
        if self.engine is not None:
            return self
        self.engine = build_engine(self.database_url)
        self._session_factory = build_session_factory(self.engine)
        Base.metadata.create_all(bind=self.engine)
        logger.info(f"Record store opened: {self.engine.url.render_as_string(hide_password=True)}")
        if self.seed_example_data:
            self.seed_if_empty()
        return self

    def close(self):
        if self.engine is None:
            return
        self.engine.dispose()
        self.engine = None
        self._session_factory = None
        logger.info("Record store closed")

    def __enter__(self):
        return self.open()

    def __exit__(self, *exc_info):
        self.close()

    @property
    def is_open(self) -> bool:
        return self.engine is not None

    @contextmanager
    def session(self) -> Iterator[Session]:
        if self._session_factory is None:
            raise RuntimeError("Record store is not open")
        db = self._session_factory()
        try:
            yield db
        finally:
            db.close()

    @contextmanager
    def serialized(self):
        """Hold the store write lock across several calls."""
        with self._lock:
            yield

    def ping(self):
        with self.session() as db:
            db.execute(text("SELECT 1"))

    def table_names(self) -> list[str]:
        return inspect(self.engine).get_table_names()

    # ── Reads ─────────────────────────────────────────────────────────────
    def get_by_id(self, record_id: int) -> Optional[VehicleRecord]:
        with self.session() as db:
            return self._lookup(db, record_id)

    def list_all(self) -> list[VehicleRecord]:
        """All records, newest first."""
        with self.session() as db:
            return (
                db.query(VehicleRecord)
                .order_by(VehicleRecord.created_at.desc(), VehicleRecord.id.desc())
                .all()
            )

    def list_by_plate(self, plate: str) -> list[VehicleRecord]:
        """Every visit of a plate, oldest first."""
        with self.session() as db:
            return (
                db.query(VehicleRecord)
                .filter(VehicleRecord.plate == plate)
                .order_by(VehicleRecord.created_at.asc(), VehicleRecord.id.asc())
                .all()
            )

    def find_inside_by_plate(self, plate: str) -> Optional[VehicleRecord]:
        with self.session() as db:
            return (
                db.query(VehicleRecord)
                .filter(VehicleRecord.plate == plate, VehicleRecord.status == STATUS_INSIDE)
                .first()
            )

    def count_inside(self) -> int:
        with self.session() as db:
            return db.query(func.count(VehicleRecord.id)).filter(
                VehicleRecord.status == STATUS_INSIDE
            ).scalar()

    def aggregate(self) -> StoreAggregate:
        """Counts, per-kind tally and the five longest-parked vehicles in one snapshot."""
        with self._lock, self.session() as db:
            total, inside, outside = db.query(
                func.count(VehicleRecord.id),
                func.coalesce(func.sum(case((VehicleRecord.status == STATUS_INSIDE, 1), else_=0)), 0),
                func.coalesce(func.sum(case((VehicleRecord.status == STATUS_OUTSIDE, 1), else_=0)), 0),
            ).one()
            by_kind = (
                db.query(VehicleRecord.kind, func.count(VehicleRecord.id))
                .group_by(VehicleRecord.kind)
                .all()
            )
            oldest = (
                db.query(VehicleRecord)
                .filter(VehicleRecord.status == STATUS_INSIDE)
                .order_by(VehicleRecord.entry_time.asc())
                .limit(OLDEST_INSIDE_LIMIT)
                .all()
            )
        return StoreAggregate(
            total=int(total),
            inside=int(inside),
            outside=int(outside),
            by_kind={kind: count for kind, count in by_kind},
            oldest_inside=oldest,
        )

    # ── Writes ────────────────────────────────────────────────────────────
    def insert(self, plate: str, kind: str, owner: str, entry_time: datetime,
               exit_time: Optional[datetime] = None) -> int:
        record = VehicleRecord(
            plate=plate,
            kind=kind,
            owner=owner,
            entry_time=entry_time,
            exit_time=exit_time,
            status=STATUS_OUTSIDE if exit_time else STATUS_INSIDE,
        )
        with self._lock, self.session() as db:
            db.add(record)
            db.commit()
            return record.id

    def update(self, record_id: int, **fields) -> VehicleRecord:
        """Replace plate/kind/owner. Entry and exit fields are not writable here."""
        allowed = {"plate", "kind", "owner"}
        unknown = set(fields) - allowed
        if unknown:
            raise ValueError(f"Fields not updatable: {sorted(unknown)}")
        with self._lock, self.session() as db:
            record = self._get_or_raise(db, record_id)
            for name, value in fields.items():
                setattr(record, name, value)
            db.commit()
            return record

    def set_exit(self, record_id: int, exit_time: datetime) -> VehicleRecord:
        with self._lock, self.session() as db:
            record = self._get_or_raise(db, record_id)
            record.exit_time = exit_time
            record.status = STATUS_OUTSIDE
            db.commit()
            return record

    def delete(self, record_id: int):
        with self._lock, self.session() as db:
            record = self._get_or_raise(db, record_id)
            db.delete(record)
            db.commit()

    def seed_if_empty(self) -> int:
        """Insert the example records into an empty table. Returns how many were added."""
        with self._lock, self.session() as db:
            if db.query(func.count(VehicleRecord.id)).scalar() > 0:
                logger.info("Record store already has data, skipping seed")
                return 0
            for example in EXAMPLE_RECORDS:
                db.add(VehicleRecord(
                    status=STATUS_OUTSIDE if example["exit_time"] else STATUS_INSIDE,
                    **example,
                ))
            db.commit()
        logger.info(f"Seeded {len(EXAMPLE_RECORDS)} example records")
        return len(EXAMPLE_RECORDS)

    @staticmethod
    def _get_or_raise(db: Session, record_id: int) -> VehicleRecord:
        record = RecordStore._lookup(db, record_id)
        if record is None:
            raise NotFoundError(f"Vehicle record {record_id} not found")
        return record

    @staticmethod
    def _lookup(db: Session, record_id: int) -> Optional[VehicleRecord]:
        # Out-of-range ids cannot exist; the driver would overflow binding them
        if not 1 <= record_id <= MAX_RECORD_ID:
            return None
        return db.get(VehicleRecord, record_id)
