import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from carrental.models.contact_message import ContactMessage, ContactMessageStatus
from carrental.services.authorization import Actor, Capability, authorize
from carrental.utils.exceptions import NotFoundError, StatusTransitionError

logger = logging.getLogger(__name__)


class ContactService:
    def __init__(self, db: Session):
        self.db = db

    def submit(self, name: str, email: str, message: str) -> ContactMessage:
        """Store a message from the public contact form. No account is needed."""
        contact = ContactMessage(
            name=name.strip(),
            email=email.strip().lower(),
            message=message.strip(),
            status=ContactMessageStatus.NEW.value,
        )
        self.db.add(contact)
        self.db.commit()
        self.db.refresh(contact)
        logger.info(f"Contact message {contact.id} received from {contact.email}")
        return contact

    def list_messages(self, actor: Actor, status: Optional[ContactMessageStatus] = None) -> list[ContactMessage]:
        authorize(actor, Capability.HANDLE_CONTACT_MESSAGES)
        query = self.db.query(ContactMessage)
        if status is not None:
            query = query.filter(ContactMessage.status == status.value)
        return query.order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc()).all()

    def mark_replied(self, actor: Actor, message_id: int) -> ContactMessage:
        authorize(actor, Capability.HANDLE_CONTACT_MESSAGES)
        contact = self.db.query(ContactMessage).filter(ContactMessage.id == message_id).first()
        if not contact:
            raise NotFoundError("Contact message", message_id)
        if contact.status == ContactMessageStatus.REPLIED.value:
            raise StatusTransitionError(contact.status, ContactMessageStatus.REPLIED.value, "message was already replied to")

        contact.status = ContactMessageStatus.REPLIED.value
        contact.replied_at = datetime.utcnow()
        self.db.commit()
        self.db.refresh(contact)
        return contact
