from flask import Blueprint, jsonify

from carrental.api.auth_middleware import current_actor, require_capability
from carrental.api.dependencies import parse_body
from carrental.database import get_db
from carrental.models.review import ReviewStatus
from carrental.schemas.review import ReviewCreateRequest, ReviewResponse
from carrental.services.authorization import Capability
from carrental.services.review_service import ReviewService


reviews_bp = Blueprint("reviews", __name__, url_prefix="/api/reviews")


def _dump(review) -> dict:
    return ReviewResponse.model_validate(review).model_dump(mode="json")


@reviews_bp.route("", methods=["POST"])
@require_capability(Capability.WRITE_REVIEW)
def create_review():
    req = parse_body(ReviewCreateRequest, "Invalid review")

    with get_db() as db:
        review = ReviewService(db).create_review(current_actor(), req.vehicle_id, req.rating, req.comment)
        return jsonify(_dump(review)), 201


@reviews_bp.route("/vehicle/<int:vehicle_id>", methods=["GET"])
def list_vehicle_reviews(vehicle_id: int):
    """Approved reviews only."""
    with get_db() as db:
        return jsonify([_dump(r) for r in ReviewService(db).list_approved_for_vehicle(vehicle_id)])


@reviews_bp.route("/<int:review_id>/approve", methods=["PUT"])
@require_capability(Capability.MODERATE_REVIEWS)
def approve_review(review_id: int):
    with get_db() as db:
        review = ReviewService(db).moderate(current_actor(), review_id, ReviewStatus.APPROVED)
        return jsonify(_dump(review))


@reviews_bp.route("/<int:review_id>/reject", methods=["PUT"])
@require_capability(Capability.MODERATE_REVIEWS)
def reject_review(review_id: int):
    with get_db() as db:
        review = ReviewService(db).moderate(current_actor(), review_id, ReviewStatus.REJECTED)
        return jsonify(_dump(review))
