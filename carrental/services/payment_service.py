import logging
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from carrental.models.booking import BookingStatus
from carrental.models.payment import Payment, PaymentStatus
from carrental.services import audit_client as audit_events
from carrental.services.audit_client import AuditClient, audit_client
from carrental.services.authorization import Actor, Capability, authorize, authorize_owner_or
from carrental.services.booking_service import BookingService
from carrental.utils.exceptions import ConflictError, ForbiddenError, NotFoundError, StatusTransitionError

logger = logging.getLogger(__name__)


def generate_transaction_id() -> str:
    return "TXN" + uuid.uuid4().hex[:8].upper()


class PaymentService:
    def __init__(self, db: Session, audit: Optional[AuditClient] = None):
        self.db = db
        self.audit = audit or audit_client
        self.bookings = BookingService(db, audit=self.audit)

    def get_payment_or_404(self, payment_id: int) -> Payment:
        payment = self.db.query(Payment).filter(Payment.id == payment_id).first()
        if not payment:
            raise NotFoundError("Payment", payment_id)
        return payment

    def create_payment(
        self,
        actor: Actor,
        booking_id: int,
        payment_method: str,
        transaction_id: Optional[str] = None,
    ) -> Payment:
        """Pay for one's own PENDING booking.

        There is no external gateway: the payment is recorded as COMPLETED
        immediately and the booking is confirmed in the same transaction.
        """
        authorize(actor, Capability.MAKE_PAYMENT)
        booking = self.bookings.get_booking_or_404(booking_id, for_update=True)
        if booking.user_id != actor.user_id:
            raise ForbiddenError("You can only pay for your own bookings", details={"booking_id": booking_id})

        if self.db.query(Payment).filter(Payment.booking_id == booking.id).first():
            raise ConflictError("Payment already exists for this booking", details={"booking_id": booking.id})

        if booking.status_enum is not BookingStatus.PENDING:
            raise StatusTransitionError(
                booking.status,
                BookingStatus.CONFIRMED.value,
                "only pending bookings can be paid",
            )

        now = datetime.utcnow()
        payment = Payment(
            booking_id=booking.id,
            amount=booking.total_amount,
            payment_method=payment_method.strip(),
            status=PaymentStatus.COMPLETED.value,
            transaction_id=transaction_id or generate_transaction_id(),
            payment_date=now,
        )
        try:
            self.db.add(payment)
            self.bookings.confirm_booking(booking)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(payment)

        logger.info(f"Payment {payment.id} completed for booking {booking.id} ({payment.amount})")
        self.audit.log_activity(
            audit_events.PAYMENT_SUCCESS,
            actor.email,
            f"Payment ID: {payment.id}, Amount: {payment.amount}",
        )
        self.audit.log_activity(audit_events.BOOKING_CONFIRMED, actor.email, f"Booking ID: {booking.id}")
        return payment

    def get_payment_by_booking(self, actor: Actor, booking_id: int) -> Payment:
        booking = self.bookings.get_booking_or_404(booking_id)
        authorize_owner_or(actor, booking.user_id, Capability.VIEW_ALL_RECORDS)

        payment = self.db.query(Payment).filter(Payment.booking_id == booking_id).first()
        if not payment:
            raise NotFoundError("Payment for booking", booking_id)
        return payment

    def update_payment_status(self, actor: Actor, payment_id: int, status: PaymentStatus) -> Payment:
        """Administrative status change. COMPLETED stamps the payment date and
        confirms a still-pending booking."""
        authorize(actor, Capability.UPDATE_PAYMENT_STATUS)
        payment = self.get_payment_or_404(payment_id)

        previous = payment.status
        payment.status = status.value
        if status is PaymentStatus.COMPLETED:
            if payment.payment_date is None:
                payment.payment_date = datetime.utcnow()
            booking = payment.booking
            if booking.status_enum is BookingStatus.PENDING:
                self.bookings.confirm_booking(booking)

        self.db.commit()
        self.db.refresh(payment)

        logger.info(f"Payment {payment.id} status {previous} -> {payment.status}")
        self.audit.log_activity(
            audit_events.PAYMENT_STATUS_UPDATED,
            actor.email,
            f"Payment ID: {payment.id}, Status: {payment.status}",
        )
        return payment

    def list_all_payments(self, actor: Actor) -> list[Payment]:
        authorize(actor, Capability.VIEW_ALL_RECORDS)
        return self.db.query(Payment).order_by(Payment.created_at.desc()).all()
