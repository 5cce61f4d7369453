import logging
from typing import Optional

from sqlalchemy import and_
from sqlalchemy.orm import Session

from carrental.models.review import Review, ReviewStatus
from carrental.models.vehicle import Vehicle
from carrental.services.authorization import Actor, Capability, authorize
from carrental.utils.exceptions import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


class ReviewService:
    def __init__(self, db: Session):
        self.db = db

    def create_review(self, actor: Actor, vehicle_id: int, rating: int, comment: Optional[str] = None) -> Review:
        authorize(actor, Capability.WRITE_REVIEW)

        vehicle = self.db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()
        if not vehicle:
            raise NotFoundError("Vehicle", vehicle_id)

        existing = self.db.query(Review).filter(
            and_(Review.user_id == actor.user_id, Review.vehicle_id == vehicle_id)
        ).first()
        if existing:
            raise ConflictError("You have already reviewed this vehicle", details={"review_id": existing.id})

        review = Review(
            user_id=actor.user_id,
            vehicle_id=vehicle_id,
            rating=rating,
            comment=(comment or "").strip() or None,
            status=ReviewStatus.PENDING.value,
        )
        self.db.add(review)
        self.db.commit()
        self.db.refresh(review)
        return review

    def list_approved_for_vehicle(self, vehicle_id: int) -> list[Review]:
        return self.db.query(Review).filter(
            and_(Review.vehicle_id == vehicle_id, Review.status == ReviewStatus.APPROVED.value)
        ).order_by(Review.created_at.desc()).all()

    def list_reviews(self, actor: Actor, status: Optional[ReviewStatus] = None) -> list[Review]:
        authorize(actor, Capability.MODERATE_REVIEWS)
        query = self.db.query(Review)
        if status is not None:
            query = query.filter(Review.status == status.value)
        return query.order_by(Review.created_at.desc()).all()

    def moderate(self, actor: Actor, review_id: int, status: ReviewStatus) -> Review:
        authorize(actor, Capability.MODERATE_REVIEWS)
        review = self.db.query(Review).filter(Review.id == review_id).first()
        if not review:
            raise NotFoundError("Review", review_id)

        review.status = status.value
        self.db.commit()
        self.db.refresh(review)
        logger.info(f"Review {review.id} marked {review.status} by {actor.email}")
        return review
