#!/usr/bin/env python3
"""Booking status transitions: cancel, confirm, complete and the scheduled completion job."""

from datetime import date, datetime

import helpers
from helpers import RecordingAuditClient, actor_for, make_booking, make_user, make_vehicle

from carrental.models.booking import BookingStatus
from carrental.services.booking_lifecycle import apply_transition, can_transition, ensure_transition
from carrental.services.booking_service import BookingService
from carrental.utils.exceptions import ForbiddenError, NotFoundError, StatusTransitionError


def _setup():
    SessionLocal = helpers.setup_in_memory_db()
    db = SessionLocal()
    vendor = make_user(db, "VENDOR")
    customer = make_user(db, "CUSTOMER")
    admin = make_user(db, "ADMIN")
    vehicle = make_vehicle(db, vendor)
    return db, vendor, customer, admin, vehicle


def test_transition_table():
    assert can_transition(BookingStatus.PENDING, BookingStatus.CONFIRMED)
    assert can_transition(BookingStatus.PENDING, BookingStatus.CANCELLED)
    assert can_transition(BookingStatus.CONFIRMED, BookingStatus.COMPLETED)
    assert can_transition(BookingStatus.CONFIRMED, BookingStatus.CANCELLED)
    assert not can_transition(BookingStatus.PENDING, BookingStatus.COMPLETED)
    assert not can_transition(BookingStatus.CONFIRMED, BookingStatus.PENDING)
    for terminal in (BookingStatus.CANCELLED, BookingStatus.COMPLETED):
        for target in BookingStatus:
            assert not can_transition(terminal, target)
    print("[PASS] transition table")


def test_terminal_state_message():
    try:
        ensure_transition(BookingStatus.COMPLETED, BookingStatus.CANCELLED)
        raise AssertionError("Expected StatusTransitionError")
    except StatusTransitionError as exc:
        assert exc.code == "INVALID_STATE"
        assert "already completed" in exc.message
        assert exc.details == {"current_status": "COMPLETED", "requested_status": "CANCELLED"}
    print("[PASS] terminal state message")


def test_apply_transition_timestamps():
    db, _, customer, _, vehicle = _setup()
    booking = make_booking(db, customer, vehicle, date(2030, 6, 1), date(2030, 6, 3), status="CONFIRMED")

    stamp = datetime(2030, 6, 3, 18, 0)
    apply_transition(booking, BookingStatus.COMPLETED, now=stamp)
    assert booking.completed_at == stamp
    assert booking.updated_at == stamp

    other = make_booking(db, customer, vehicle, date(2030, 7, 1), date(2030, 7, 3))
    apply_transition(other, BookingStatus.CANCELLED)
    assert other.cancelled_at is not None
    db.close()
    print("[PASS] apply_transition timestamps")


def test_owner_cancels_pending_booking():
    db, _vendor, customer, _admin, vehicle = _setup()
    try:
        booking = make_booking(db, customer, vehicle, date(2025, 1, 1), date(2025, 1, 5))
        audit = RecordingAuditClient()
        cancelled = BookingService(db, audit=audit).cancel_booking(actor_for(customer), booking.id)
        assert cancelled.status == "CANCELLED"
        assert cancelled.cancelled_at is not None
        assert audit.actions == ["BOOKING_CANCELLED"]
    finally:
        db.close()
    print("[PASS] owner cancels pending booking")


def test_owner_cancels_confirmed_booking():
    db, _vendor, customer, _admin, vehicle = _setup()
    try:
        booking = make_booking(db, customer, vehicle, date(2025, 1, 1), date(2025, 1, 5), status="CONFIRMED")
        cancelled = BookingService(db, audit=RecordingAuditClient()).cancel_booking(actor_for(customer), booking.id)
        assert cancelled.status == "CANCELLED"
    finally:
        db.close()
    print("[PASS] owner cancels confirmed booking")


def test_cancel_completed_booking_is_invalid_state():
    db, _vendor, customer, _admin, vehicle = _setup()
    try:
        booking = make_booking(db, customer, vehicle, date(2025, 1, 1), date(2025, 1, 5), status="COMPLETED")
        try:
            BookingService(db, audit=RecordingAuditClient()).cancel_booking(actor_for(customer), booking.id)
            raise AssertionError("Expected StatusTransitionError")
        except StatusTransitionError as exc:
            assert exc.status_code == 409
        db.refresh(booking)
        assert booking.status == "COMPLETED"
    finally:
        db.close()
    print("[PASS] cancel completed -> InvalidState")


def test_cancel_twice_is_invalid_state():
    db, _vendor, customer, _admin, vehicle = _setup()
    try:
        booking = make_booking(db, customer, vehicle, date(2025, 1, 1), date(2025, 1, 5))
        service = BookingService(db, audit=RecordingAuditClient())
        service.cancel_booking(actor_for(customer), booking.id)
        try:
            service.cancel_booking(actor_for(customer), booking.id)
            raise AssertionError("Expected StatusTransitionError")
        except StatusTransitionError as exc:
            assert "already cancelled" in exc.message
    finally:
        db.close()
    print("[PASS] cancel twice -> InvalidState")


def test_non_owner_cannot_cancel():
    db, vendor, customer, _admin, vehicle = _setup()
    try:
        other_customer = make_user(db, "CUSTOMER")
        booking = make_booking(db, customer, vehicle, date(2025, 1, 1), date(2025, 1, 5))
        service = BookingService(db, audit=RecordingAuditClient())
        for intruder in (other_customer, vendor):
            try:
                service.cancel_booking(actor_for(intruder), booking.id)
                raise AssertionError("Expected ForbiddenError")
            except ForbiddenError as exc:
                assert exc.status_code == 403
        db.refresh(booking)
        assert booking.status == "PENDING"
    finally:
        db.close()
    print("[PASS] non-owner cancel -> Forbidden")


def test_admin_can_cancel_any_booking():
    db, _vendor, customer, admin, vehicle = _setup()
    try:
        booking = make_booking(db, customer, vehicle, date(2025, 1, 1), date(2025, 1, 5))
        cancelled = BookingService(db, audit=RecordingAuditClient()).cancel_booking(actor_for(admin), booking.id)
        assert cancelled.status == "CANCELLED"
    finally:
        db.close()
    print("[PASS] admin cancels any booking")


def test_cancel_missing_booking():
    db, _vendor, customer, _admin, _vehicle = _setup()
    try:
        try:
            BookingService(db, audit=RecordingAuditClient()).cancel_booking(actor_for(customer), 424242)
            raise AssertionError("Expected NotFoundError")
        except NotFoundError as exc:
            assert exc.details["resource_id"] == "424242"
    finally:
        db.close()
    print("[PASS] cancel missing -> NotFound")


def test_vendor_cannot_create_booking():
    db, vendor, _customer, _admin, vehicle = _setup()
    try:
        try:
            BookingService(db, audit=RecordingAuditClient()).create_booking(
                actor_for(vendor), vehicle.id, date(2025, 1, 1), date(2025, 1, 3), "A", "B", today=date(2024, 12, 1)
            )
            raise AssertionError("Expected ForbiddenError")
        except ForbiddenError as exc:
            assert exc.details["capability"] == "create_booking"
    finally:
        db.close()
    print("[PASS] vendor create -> Forbidden")


def test_admin_completes_after_return_date():
    db, _vendor, customer, admin, vehicle = _setup()
    try:
        booking = make_booking(db, customer, vehicle, date(2025, 1, 1), date(2025, 1, 5), status="CONFIRMED")
        service = BookingService(db, audit=RecordingAuditClient())

        try:
            service.complete_booking(actor_for(admin), booking.id, today=date(2025, 1, 4))
            raise AssertionError("Expected StatusTransitionError before return date")
        except StatusTransitionError as exc:
            assert "has not been reached" in exc.message

        completed = service.complete_booking(actor_for(admin), booking.id, today=date(2025, 1, 5))
        assert completed.status == "COMPLETED"
        assert completed.completed_at is not None
    finally:
        db.close()
    print("[PASS] admin completes after return date")


def test_pending_booking_cannot_be_completed():
    db, _vendor, customer, admin, vehicle = _setup()
    try:
        booking = make_booking(db, customer, vehicle, date(2025, 1, 1), date(2025, 1, 5))
        try:
            BookingService(db, audit=RecordingAuditClient()).complete_booking(
                actor_for(admin), booking.id, today=date(2025, 2, 1)
            )
            raise AssertionError("Expected StatusTransitionError")
        except StatusTransitionError as exc:
            assert exc.details["current_status"] == "PENDING"
    finally:
        db.close()
    print("[PASS] pending -> completed rejected")


def test_customer_cannot_complete():
    db, _vendor, customer, _admin, vehicle = _setup()
    try:
        booking = make_booking(db, customer, vehicle, date(2025, 1, 1), date(2025, 1, 5), status="CONFIRMED")
        try:
            BookingService(db, audit=RecordingAuditClient()).complete_booking(
                actor_for(customer), booking.id, today=date(2025, 2, 1)
            )
            raise AssertionError("Expected ForbiddenError")
        except ForbiddenError:
            pass
    finally:
        db.close()
    print("[PASS] customer complete -> Forbidden")


def test_complete_due_bookings():
    db, _vendor, customer, _admin, vehicle = _setup()
    try:
        due = make_booking(db, customer, vehicle, date(2025, 1, 1), date(2025, 1, 5), status="CONFIRMED")
        returning_today = make_booking(db, customer, vehicle, date(2025, 1, 6), date(2025, 1, 10), status="CONFIRMED")
        unpaid = make_booking(db, customer, vehicle, date(2025, 1, 1), date(2025, 1, 3))

        audit = RecordingAuditClient()
        count = BookingService(db, audit=audit).complete_due_bookings(today=date(2025, 1, 10))
        assert count == 1
        assert audit.events == [("BOOKING_COMPLETED", "system", f"Booking ID: {due.id}")]

        db.refresh(due)
        db.refresh(returning_today)
        db.refresh(unpaid)
        assert due.status == "COMPLETED"
        assert returning_today.status == "CONFIRMED"
        assert unpaid.status == "PENDING"
    finally:
        db.close()
    print("[PASS] scheduled completion")


def test_storage_insert_and_status_update():
    db, _, customer, _, vehicle = _setup()
    from carrental.models.booking import Booking

    service = BookingService(db, audit=RecordingAuditClient())
    booking = service.insert_booking(Booking(
        user_id=customer.id,
        vehicle_id=vehicle.id,
        pickup_date=date(2030, 5, 1),
        return_date=date(2030, 5, 4),
        pickup_location="Depot",
        return_location="Depot",
        total_amount=150.0,
        status=BookingStatus.PENDING.value,
    ))
    assert booking.id is not None

    updated = service.update_booking_status(booking.id, BookingStatus.CANCELLED)
    assert updated.status == BookingStatus.CANCELLED.value
    assert updated.cancelled_at is not None

    try:
        service.update_booking_status(booking.id, BookingStatus.CONFIRMED)
        assert False, "Expected StatusTransitionError"
    except StatusTransitionError:
        pass
    db.close()
    print("[PASS] storage insert and status update")


def test_booking_visibility():
    db, vendor, customer, admin, vehicle = _setup()
    try:
        booking = make_booking(db, customer, vehicle, date(2025, 1, 1), date(2025, 1, 5))
        service = BookingService(db, audit=RecordingAuditClient())
        for viewer in (customer, vendor, admin):
            assert service.get_booking(actor_for(viewer), booking.id).id == booking.id

        stranger = make_user(db, "CUSTOMER")
        try:
            service.get_booking(actor_for(stranger), booking.id)
            raise AssertionError("Expected ForbiddenError")
        except ForbiddenError:
            pass

        assert [b.id for b in service.list_user_bookings(actor_for(customer))] == [booking.id]
        assert [b.id for b in service.list_vendor_bookings(actor_for(vendor))] == [booking.id]
        assert service.list_user_bookings(actor_for(stranger)) == []
    finally:
        db.close()
    print("[PASS] booking visibility")


if __name__ == "__main__":
    test_apply_transition_timestamps()
    test_storage_insert_and_status_update()
    test_transition_table()
    test_terminal_state_message()
    test_owner_cancels_pending_booking()
    test_owner_cancels_confirmed_booking()
    test_cancel_completed_booking_is_invalid_state()
    test_cancel_twice_is_invalid_state()
    test_non_owner_cannot_cancel()
    test_admin_can_cancel_any_booking()
    test_cancel_missing_booking()
    test_vendor_cannot_create_booking()
    test_admin_completes_after_return_date()
    test_pending_booking_cannot_be_completed()
    test_customer_cannot_complete()
    test_complete_due_bookings()
    test_booking_visibility()
    print("[SUCCESS] All booking lifecycle tests passed")
