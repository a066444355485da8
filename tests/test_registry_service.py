"""Unit tests for the registry service: entry/exit rules, edits, history and statistics."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from parking_registry.errors import (
    AlreadyExitedError,
    CapacityError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from parking_registry.services.registry_service import RegistryService


class TestRegisterEntry:
    def test_valid_entry_is_inside_and_uppercased(self, registry):
        record = registry.register_entry("abc123", "Car", "Ana")

        assert record.plate == "ABC123"
        assert record.status == "Inside"
        assert record.exit_time is None

    def test_entry_time_comes_from_clock(self, registry, clock):
        record = registry.register_entry("ABC123", "Car", "Ana")
        assert record.entry_time == clock.now

    @pytest.mark.parametrize("plate", ["AB123", "ABCD123", "123ABC", "AB-123", "ÁBC123", "ABC12"])
    def test_bad_plate_format_rejected(self, registry, plate):
        with pytest.raises(ValidationError):
            registry.register_entry(plate, "Car", "Ana")

    @pytest.mark.parametrize("plate,kind,owner", [
        ("", "Car", "Ana"),
        ("ABC123", "", "Ana"),
        ("ABC123", "Car", "   "),
        (None, "Car", "Ana"),
    ])
    def test_missing_fields_rejected(self, registry, plate, kind, owner):
        with pytest.raises(ValidationError):
            registry.register_entry(plate, kind, owner)

    def test_same_plate_twice_while_inside_conflicts(self, registry):
        registry.register_entry("ABC123", "Car", "Ana")
        with pytest.raises(ConflictError):
            registry.register_entry("abc123", "Car", "Ana")

    def test_same_plate_allowed_again_after_exit(self, registry):
        first = registry.register_entry("ABC123", "Car", "Ana")
        registry.register_exit(first.id)

        second = registry.register_entry("ABC123", "Car", "Ana")
        assert second.id != first.id

    def test_open_kind_enumeration(self, registry):
        assert registry.register_entry("ABC123", "Tractor", "Ana").kind == "Tractor"

    def test_capacity_boundary(self, registry):
        # capacity is 3 in the fixture
        registry.register_entry("AAA111", "Car", "A")
        registry.register_entry("BBB222", "Car", "B")
        assert registry.register_entry("CCC333", "Car", "C").status == "Inside"

        with pytest.raises(CapacityError):
            registry.register_entry("DDD444", "Car", "D")

    def test_exit_frees_a_space(self, registry):
        records = [registry.register_entry(p, "Car", "x") for p in ("AAA111", "BBB222", "CCC333")]
        registry.register_exit(records[0].id)
        assert registry.register_entry("DDD444", "Car", "D").status == "Inside"

    def test_capacity_must_be_positive(self, store):
        with pytest.raises(ValueError):
            RegistryService(store, capacity=0)


class TestRegisterExit:
    def test_exit_sets_outside_and_exit_time(self, registry, clock):
        record = registry.register_entry("ABC123", "Car", "Ana")
        clock.advance(hours=2)

        exited = registry.register_exit(record.id)

        assert exited.status == "Outside"
        assert exited.exit_time == clock.now
        assert exited.entry_time == record.entry_time

    def test_second_exit_rejected(self, registry):
        record = registry.register_entry("ABC123", "Car", "Ana")
        registry.register_exit(record.id)
        with pytest.raises(AlreadyExitedError):
            registry.register_exit(record.id)

    def test_exit_unknown_id(self, registry):
        with pytest.raises(NotFoundError):
            registry.register_exit(404)


class TestUpdateAndDelete:
    def test_partial_update_keeps_other_fields(self, registry):
        record = registry.register_entry("ABC123", "Car", "Ana")

        updated = registry.update_record(record.id, owner="Ana María")

        assert updated.owner == "Ana María"
        assert updated.plate == "ABC123"
        assert updated.kind == "Car"
        assert updated.entry_time == record.entry_time

    def test_empty_values_are_ignored(self, registry):
        record = registry.register_entry("ABC123", "Car", "Ana")
        updated = registry.update_record(record.id, plate="", kind="", owner=None)
        assert (updated.plate, updated.kind, updated.owner) == ("ABC123", "Car", "Ana")

    def test_plate_is_uppercased_and_revalidated(self, registry):
        record = registry.register_entry("ABC123", "Car", "Ana")
        assert registry.update_record(record.id, plate="xyz999").plate == "XYZ999"
        with pytest.raises(ValidationError):
            registry.update_record(record.id, plate="nope")

    def test_plate_edit_cannot_duplicate_an_inside_plate(self, registry):
        registry.register_entry("ABC123", "Car", "Ana")
        other = registry.register_entry("XYZ999", "Car", "Luis")
        with pytest.raises(ConflictError):
            registry.update_record(other.id, plate="abc123")

    def test_outside_record_may_take_an_inside_plate(self, registry):
        old = registry.register_entry("XYZ999", "Car", "Luis")
        registry.register_exit(old.id)
        registry.register_entry("ABC123", "Car", "Ana")

        assert registry.update_record(old.id, plate="ABC123").plate == "ABC123"

    def test_update_unknown_id(self, registry):
        with pytest.raises(NotFoundError):
            registry.update_record(404, owner="x")

    def test_delete_returns_snapshot_and_removes(self, registry):
        record = registry.register_entry("ABC123", "Car", "Ana")

        deleted = registry.delete_record(record.id)

        assert deleted.id == record.id
        assert deleted.plate == "ABC123"
        with pytest.raises(NotFoundError):
            registry.get_record(record.id)

    def test_delete_is_unconditional_on_status(self, registry):
        record = registry.register_entry("ABC123", "Car", "Ana")
        registry.register_exit(record.id)
        registry.delete_record(record.id)
        with pytest.raises(NotFoundError):
            registry.delete_record(record.id)


class TestHistory:
    def test_average_over_completed_visits(self, registry, clock):
        first = registry.register_entry("ABC123", "Car", "Ana")
        clock.advance(hours=2)
        registry.register_exit(first.id)
        clock.advance(hours=1)
        second = registry.register_entry("ABC123", "Car", "Ana")
        clock.advance(hours=4)
        registry.register_exit(second.id)

        history = registry.get_history("abc123")

        assert history.plate == "ABC123"
        assert history.total_visits == 2
        assert history.completed_visits == 2
        assert history.average_duration_hours == 3.0
        assert [r.id for r in history.history] == [first.id, second.id]

    def test_open_visit_counts_but_not_in_average(self, registry, clock):
        first = registry.register_entry("ABC123", "Car", "Ana")
        clock.advance(minutes=90)
        registry.register_exit(first.id)
        registry.register_entry("ABC123", "Car", "Ana")

        history = registry.get_history("ABC123")

        assert history.total_visits == 2
        assert history.completed_visits == 1
        assert history.average_duration_hours == 1.5

    def test_no_completed_visits_average_is_zero(self, registry):
        registry.register_entry("ABC123", "Car", "Ana")
        assert registry.get_history("ABC123").average_duration_hours == 0.0

    def test_unknown_plate(self, registry):
        with pytest.raises(NotFoundError):
            registry.get_history("ZZZ000")


class TestStatistics:
    def test_empty_lot(self, registry):
        stats = registry.get_statistics()

        assert stats.total_vehicles == 0
        assert stats.available_spaces == 3
        assert stats.occupancy_percent == 0
        assert stats.by_kind == {"Car": 0, "Motorcycle": 0}

    def test_counts_and_occupancy(self, registry, clock):
        car = registry.register_entry("AAA111", "Car", "A")
        clock.advance(minutes=10)
        registry.register_entry("BBB222", "Motorcycle", "B")
        clock.advance(minutes=10)
        registry.register_entry("CCC333", "Truck", "C")
        registry.register_exit(car.id)

        stats = registry.get_statistics()

        assert stats.total_vehicles == 3
        assert stats.vehicles_inside == 2
        assert stats.vehicles_outside == 1
        assert stats.by_kind == {"Car": 1, "Motorcycle": 1, "Truck": 1}
        assert stats.occupancy_percent == 67
        assert [r.plate for r in stats.oldest_inside] == ["BBB222", "CCC333"]

    def test_available_plus_inside_equals_capacity(self, registry):
        for plate in ("AAA111", "BBB222", "CCC333"):
            registry.register_entry(plate, "Car", "x")
            stats = registry.get_statistics()
            assert stats.available_spaces + stats.vehicles_inside == stats.capacity

    def test_occupancy_rounds_half_up(self, store):
        registry = RegistryService(store, capacity=8)
        registry.register_entry("ABC123", "Car", "Ana")

        # 1/8 = 12.5%
        assert registry.get_statistics().occupancy_percent == 13


def run_concurrently(calls):
    """Start every call at the same instant; return (results, errors)."""
    barrier = threading.Barrier(len(calls))

    def run(call):
        barrier.wait()
        try:
            return call(), None
        except Exception as e:
            return None, e

    with ThreadPoolExecutor(max_workers=len(calls)) as pool:
        outcomes = list(pool.map(run, calls))
    return [r for r, _ in outcomes if r is not None], [e for _, e in outcomes if e is not None]


class TestConcurrentEntries:
    def test_same_plate_admitted_once(self, registry, store):
        calls = [lambda: registry.register_entry("ABC123", "Car", "Ana")] * 8

        results, errors = run_concurrently(calls)

        assert len(results) == 1
        assert len(errors) == 7
        assert all(isinstance(e, ConflictError) for e in errors)
        assert store.count_inside() == 1

    def test_capacity_never_exceeded(self, registry, store):
        plates = [f"AAA{i:03d}" for i in range(8)]
        calls = [lambda p=p: registry.register_entry(p, "Car", "x") for p in plates]

        results, errors = run_concurrently(calls)

        assert len(results) == registry.capacity
        assert all(isinstance(e, CapacityError) for e in errors)
        assert store.count_inside() == registry.capacity
