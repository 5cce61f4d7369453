#!/usr/bin/env python3
"""Review moderation and complaint handling."""

from datetime import date

import helpers
from helpers import actor_for, make_booking, make_user, make_vehicle

from carrental.models.review import ReviewStatus
from carrental.services.complaint_service import ComplaintService
from carrental.services.review_service import ReviewService
from carrental.utils.exceptions import ConflictError, ForbiddenError, NotFoundError, StatusTransitionError


def _setup():
    SessionLocal = helpers.setup_in_memory_db()
    db = SessionLocal()
    vendor = make_user(db, "VENDOR")
    customer = make_user(db, "CUSTOMER")
    admin = make_user(db, "ADMIN")
    vehicle = make_vehicle(db, vendor)
    return db, customer, admin, vehicle


def test_review_needs_no_prior_rental():
    db, customer, _admin, vehicle = _setup()
    try:
        service = ReviewService(db)
        review = service.create_review(actor_for(customer), vehicle.id, 5, "great")
        assert review.status == "PENDING"
        assert review.user_id == customer.id

        try:
            service.create_review(actor_for(customer), vehicle.id + 999, 5)
            raise AssertionError("Expected NotFoundError")
        except NotFoundError:
            pass
    finally:
        db.close()
    print("[PASS] review accepted without a prior rental")


def test_one_review_per_vehicle_and_moderation():
    db, customer, admin, vehicle = _setup()
    try:
        make_booking(db, customer, vehicle, date(2025, 1, 1), date(2025, 1, 3), status="COMPLETED")
        service = ReviewService(db)

        review = service.create_review(actor_for(customer), vehicle.id, 4, "  Clean car  ")
        assert review.status == "PENDING"
        assert review.comment == "Clean car"
        assert service.list_approved_for_vehicle(vehicle.id) == []

        try:
            service.create_review(actor_for(customer), vehicle.id, 5)
            raise AssertionError("Expected ConflictError")
        except ConflictError:
            pass

        try:
            service.moderate(actor_for(customer), review.id, ReviewStatus.APPROVED)
            raise AssertionError("Expected ForbiddenError")
        except ForbiddenError:
            pass

        service.moderate(actor_for(admin), review.id, ReviewStatus.APPROVED)
        assert [r.id for r in service.list_approved_for_vehicle(vehicle.id)] == [review.id]

        service.moderate(actor_for(admin), review.id, ReviewStatus.REJECTED)
        assert service.list_approved_for_vehicle(vehicle.id) == []
        assert [r.id for r in service.list_reviews(actor_for(admin), ReviewStatus.REJECTED)] == [review.id]
    finally:
        db.close()
    print("[PASS] review lifecycle")


def test_complaint_flow():
    db, customer, admin, vehicle = _setup()
    try:
        booking = make_booking(db, customer, vehicle, date(2025, 1, 1), date(2025, 1, 3))
        service = ComplaintService(db)

        complaint = service.create_complaint(actor_for(customer), "Dirty car", "Seats were stained", booking.id)
        assert complaint.status == "PENDING"
        assert complaint.booking_id == booking.id
        assert [c.id for c in service.list_user_complaints(actor_for(customer))] == [complaint.id]

        try:
            service.list_all_complaints(actor_for(customer))
            raise AssertionError("Expected ForbiddenError")
        except ForbiddenError:
            pass

        resolved = service.resolve_complaint(actor_for(admin), complaint.id, "Refunded cleaning fee")
        assert resolved.status == "RESOLVED"
        assert resolved.admin_response == "Refunded cleaning fee"
        assert resolved.resolved_at is not None

        try:
            service.resolve_complaint(actor_for(admin), complaint.id, "Again")
            raise AssertionError("Expected StatusTransitionError")
        except StatusTransitionError:
            pass
    finally:
        db.close()
    print("[PASS] complaint flow")


def test_complaint_cannot_reference_others_booking():
    db, customer, _admin, vehicle = _setup()
    try:
        booking = make_booking(db, customer, vehicle, date(2025, 1, 1), date(2025, 1, 3))
        other = make_user(db, "CUSTOMER")
        try:
            ComplaintService(db).create_complaint(actor_for(other), "Hi", "Not mine", booking.id)
            raise AssertionError("Expected ForbiddenError")
        except ForbiddenError:
            pass

        # General complaints need no booking
        complaint = ComplaintService(db).create_complaint(actor_for(other), "App", "Login is slow")
        assert complaint.booking_id is None
    finally:
        db.close()
    print("[PASS] complaint booking ownership")


if __name__ == "__main__":
    test_review_needs_no_prior_rental()
    test_one_review_per_vehicle_and_moderation()
    test_complaint_flow()
    test_complaint_cannot_reference_others_booking()
    print("[SUCCESS] All review and complaint tests passed")
