#!/usr/bin/env python3
"""Booking conflict detection: date validation, overlap rules and booking creation.

These tests are written to run under pytest OR as a standalone script.
Calendar dates in the past are used with an explicit ``today``.
"""

import threading
from datetime import date

import helpers
from helpers import RecordingAuditClient, actor_for, make_booking, make_user, make_vehicle

from carrental.services.availability_service import AvailabilityService, ranges_overlap, validate_date_range
from carrental.services.booking_service import BookingService
from carrental.utils.exceptions import BookingConflictError, ConflictError, NotFoundError, ValidationError

TODAY = date(2024, 12, 1)


def _setup():
    SessionLocal = helpers.setup_in_memory_db()
    db = SessionLocal()
    vendor = make_user(db, "VENDOR")
    customer = make_user(db, "CUSTOMER")
    vehicle = make_vehicle(db, vendor, price_per_day=50.0)
    return db, customer, vehicle


def _create(db, customer, vehicle, pickup, ret, **kwargs):
    service = BookingService(db, audit=RecordingAuditClient(), **kwargs)
    return service.create_booking(
        actor_for(customer),
        vehicle_id=vehicle.id,
        pickup_date=pickup,
        return_date=ret,
        pickup_location="Downtown",
        return_location="Airport",
        today=TODAY,
    )


def test_ranges_overlap_closed_and_half_open():
    a = (date(2025, 3, 10), date(2025, 3, 15))
    touching = (date(2025, 3, 15), date(2025, 3, 20))
    apart = (date(2025, 3, 16), date(2025, 3, 20))

    assert ranges_overlap(*a, *touching) is True
    assert ranges_overlap(*a, *touching, half_open=True) is False
    assert ranges_overlap(*a, *apart) is False
    assert ranges_overlap(date(2025, 3, 1), date(2025, 3, 31), *a) is True
    print("[PASS] overlap predicate")


def test_equal_dates_rejected():
    try:
        validate_date_range(date(2025, 1, 5), date(2025, 1, 5), today=TODAY)
        raise AssertionError("Expected ValidationError for zero-length range")
    except ValidationError as exc:
        assert exc.code == "INVALID_ARGUMENT"
        assert exc.field == "return_date"
    print("[PASS] pickup == return rejected")


def test_past_pickup_rejected():
    try:
        validate_date_range(date(2024, 11, 30), date(2024, 12, 3), today=TODAY)
        raise AssertionError("Expected ValidationError for past pickup")
    except ValidationError as exc:
        assert exc.field == "pickup_date"

    # Pickup today is allowed
    validate_date_range(TODAY, date(2024, 12, 2), today=TODAY)
    print("[PASS] past pickup rejected")


def test_range_validated_before_vehicle_lookup():
    db, _customer, _vehicle = _setup()
    try:
        service = AvailabilityService(db)
        try:
            service.has_conflict(99999, date(2025, 1, 5), date(2025, 1, 2), today=TODAY)
            raise AssertionError("Expected ValidationError")
        except ValidationError:
            pass

        try:
            service.has_conflict(99999, date(2025, 1, 1), date(2025, 1, 5), today=TODAY)
            raise AssertionError("Expected NotFoundError")
        except NotFoundError as exc:
            assert exc.status_code == 404
    finally:
        db.close()
    print("[PASS] validation precedes NotFound")


def test_non_overlapping_bookings_both_succeed():
    db, customer, vehicle = _setup()
    try:
        first = _create(db, customer, vehicle, date(2025, 1, 1), date(2025, 1, 5))
        second = _create(db, customer, vehicle, date(2025, 1, 6), date(2025, 1, 10))
        assert first.status == "PENDING"
        assert second.status == "PENDING"
        assert first.total_amount == 200.0
        assert second.total_amount == 200.0
    finally:
        db.close()
    print("[PASS] non-overlapping bookings succeed")


def test_overlapping_booking_conflicts():
    db, customer, vehicle = _setup()
    try:
        first = _create(db, customer, vehicle, date(2025, 1, 1), date(2025, 1, 5))
        try:
            _create(db, customer, vehicle, date(2025, 1, 3), date(2025, 1, 8))
            raise AssertionError("Expected BookingConflictError")
        except BookingConflictError as exc:
            assert isinstance(exc, ConflictError)
            assert exc.status_code == 409
            assert exc.details["conflicting_booking_ids"] == [first.id]
    finally:
        db.close()
    print("[PASS] overlapping booking -> Conflict")


def test_cancelled_booking_never_blocks():
    db, customer, vehicle = _setup()
    try:
        make_booking(db, customer, vehicle, date(2025, 1, 1), date(2025, 1, 5), status="CANCELLED")
        booking = _create(db, customer, vehicle, date(2025, 1, 1), date(2025, 1, 5))
        assert booking.id is not None
    finally:
        db.close()
    print("[PASS] cancelled booking does not block")


def test_completed_booking_never_blocks():
    db, customer, vehicle = _setup()
    try:
        make_booking(db, customer, vehicle, date(2025, 1, 1), date(2025, 1, 5), status="COMPLETED")
        assert AvailabilityService(db).has_conflict(
            vehicle.id, date(2025, 1, 2), date(2025, 1, 4), today=TODAY
        ) is False
    finally:
        db.close()
    print("[PASS] completed booking does not block")


def test_return_day_equals_pickup_day_conflicts_by_default():
    db, customer, vehicle = _setup()
    try:
        make_booking(db, customer, vehicle, date(2025, 3, 10), date(2025, 3, 15), status="CONFIRMED")
        try:
            _create(db, customer, vehicle, date(2025, 3, 15), date(2025, 3, 20))
            raise AssertionError("Expected BookingConflictError on shared boundary day")
        except BookingConflictError:
            pass
    finally:
        db.close()
    print("[PASS] shared boundary day conflicts (closed intervals)")


def test_same_day_turnover_allows_shared_boundary():
    db, customer, vehicle = _setup()
    try:
        make_booking(db, customer, vehicle, date(2025, 3, 10), date(2025, 3, 15), status="CONFIRMED")
        availability = AvailabilityService(db, same_day_turnover=True)
        booking = _create(db, customer, vehicle, date(2025, 3, 15), date(2025, 3, 20), availability=availability)
        assert booking.pickup_date == date(2025, 3, 15)
    finally:
        db.close()
    print("[PASS] same-day turnover mode allows shared boundary")


def test_other_vehicles_do_not_block():
    db, customer, vehicle = _setup()
    try:
        other = make_vehicle(db, vehicle.vendor)
        make_booking(db, customer, other, date(2025, 1, 1), date(2025, 1, 5), status="CONFIRMED")
        assert AvailabilityService(db).has_conflict(
            vehicle.id, date(2025, 1, 1), date(2025, 1, 5), today=TODAY
        ) is False
    finally:
        db.close()
    print("[PASS] bookings on other vehicles ignored")


def test_vehicle_status_is_not_consulted():
    SessionLocal = helpers.setup_in_memory_db()
    db = SessionLocal()
    try:
        vendor = make_user(db, "VENDOR")
        customer = make_user(db, "CUSTOMER")
        vehicle = make_vehicle(db, vendor, status="UNDER_MAINTENANCE")
        booking = _create(db, customer, vehicle, date(2025, 2, 1), date(2025, 2, 3))
        assert booking.status == "PENDING"
    finally:
        db.close()
    print("[PASS] informational vehicle status ignored")


def test_missing_location_rejected():
    db, customer, vehicle = _setup()
    try:
        service = BookingService(db, audit=RecordingAuditClient())
        try:
            service.create_booking(
                actor_for(customer), vehicle.id, date(2025, 1, 1), date(2025, 1, 2), "  ", "Airport", today=TODAY
            )
            raise AssertionError("Expected ValidationError")
        except ValidationError as exc:
            assert exc.field == "pickup_location"
    finally:
        db.close()
    print("[PASS] blank location rejected")


def test_concurrent_requests_for_same_dates_admit_one():
    SessionLocal = helpers.setup_in_memory_db()
    setup_db = SessionLocal()
    vendor = make_user(setup_db, "VENDOR")
    customers = [make_user(setup_db, "CUSTOMER") for _ in range(4)]
    vehicle = make_vehicle(setup_db, vendor)
    vehicle_id = vehicle.id
    actors = [actor_for(c) for c in customers]
    setup_db.close()

    results = []
    results_lock = threading.Lock()
    start = threading.Barrier(len(actors))

    def attempt(actor):
        db = SessionLocal()
        try:
            start.wait()
            BookingService(db, audit=RecordingAuditClient()).create_booking(
                actor, vehicle_id, date(2025, 5, 1), date(2025, 5, 4), "Downtown", "Downtown", today=TODAY
            )
            outcome = "created"
        except BookingConflictError:
            outcome = "conflict"
        finally:
            db.close()
        with results_lock:
            results.append(outcome)

    threads = [threading.Thread(target=attempt, args=(a,)) for a in actors]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)

    assert sorted(results) == ["conflict", "conflict", "conflict", "created"]
    print("[PASS] concurrent creates admit exactly one")


if __name__ == "__main__":
    test_ranges_overlap_closed_and_half_open()
    test_equal_dates_rejected()
    test_past_pickup_rejected()
    test_range_validated_before_vehicle_lookup()
    test_non_overlapping_bookings_both_succeed()
    test_overlapping_booking_conflicts()
    test_cancelled_booking_never_blocks()
    test_completed_booking_never_blocks()
    test_return_day_equals_pickup_day_conflicts_by_default()
    test_same_day_turnover_allows_shared_boundary()
    test_other_vehicles_do_not_block()
    test_vehicle_status_is_not_consulted()
    test_missing_location_rejected()
    test_concurrent_requests_for_same_dates_admit_one()
    print("[SUCCESS] All availability tests passed")
