import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from carrental.models.booking import Booking
from carrental.models.complaint import Complaint, ComplaintStatus
from carrental.services.authorization import Actor, Capability, authorize
from carrental.utils.exceptions import ForbiddenError, NotFoundError, StatusTransitionError

logger = logging.getLogger(__name__)


class ComplaintService:
    def __init__(self, db: Session):
        self.db = db

    def create_complaint(
        self,
        actor: Actor,
        subject: str,
        description: str,
        booking_id: Optional[int] = None,
    ) -> Complaint:
        authorize(actor, Capability.FILE_COMPLAINT)

        if booking_id is not None:
            booking = self.db.query(Booking).filter(Booking.id == booking_id).first()
            if not booking:
                raise NotFoundError("Booking", booking_id)
            if booking.user_id != actor.user_id and not actor.is_admin:
                raise ForbiddenError("Complaints can only reference your own bookings", details={"booking_id": booking_id})

        complaint = Complaint(
            user_id=actor.user_id,
            subject=subject.strip(),
            description=description.strip(),
            booking_id=booking_id,
            status=ComplaintStatus.PENDING.value,
        )
        self.db.add(complaint)
        self.db.commit()
        self.db.refresh(complaint)
        return complaint

    def list_user_complaints(self, actor: Actor) -> list[Complaint]:
        return self.db.query(Complaint).filter(
            Complaint.user_id == actor.user_id
        ).order_by(Complaint.created_at.desc()).all()

    def list_all_complaints(self, actor: Actor, status: Optional[ComplaintStatus] = None) -> list[Complaint]:
        authorize(actor, Capability.RESOLVE_COMPLAINTS)
        query = self.db.query(Complaint)
        if status is not None:
            query = query.filter(Complaint.status == status.value)
        return query.order_by(Complaint.created_at.desc()).all()

    def resolve_complaint(self, actor: Actor, complaint_id: int, admin_response: str) -> Complaint:
        authorize(actor, Capability.RESOLVE_COMPLAINTS)
        complaint = self.db.query(Complaint).filter(Complaint.id == complaint_id).first()
        if not complaint:
            raise NotFoundError("Complaint", complaint_id)
        if complaint.status == ComplaintStatus.RESOLVED.value:
            raise StatusTransitionError(complaint.status, ComplaintStatus.RESOLVED.value, "complaint is already resolved")

        complaint.status = ComplaintStatus.RESOLVED.value
        complaint.admin_response = admin_response.strip()
        complaint.resolved_at = datetime.utcnow()
        self.db.commit()
        self.db.refresh(complaint)
        logger.info(f"Complaint {complaint.id} resolved by {actor.email}")
        return complaint
