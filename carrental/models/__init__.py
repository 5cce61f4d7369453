from carrental.models.user import User, UserRole, UserStatus
from carrental.models.vehicle import Vehicle, VehicleStatus
from carrental.models.booking import Booking, BookingStatus, ACTIVE_BOOKING_STATUSES
from carrental.models.payment import Payment, PaymentStatus
from carrental.models.review import Review, ReviewStatus
from carrental.models.complaint import Complaint, ComplaintStatus
from carrental.models.contact_message import ContactMessage, ContactMessageStatus

__all__ = [
    "User",
    "UserRole",
    "UserStatus",
    "Vehicle",
    "VehicleStatus",
    "Booking",
    "BookingStatus",
    "ACTIVE_BOOKING_STATUSES",
    "Payment",
    "PaymentStatus",
    "Review",
    "ReviewStatus",
    "Complaint",
    "ComplaintStatus",
    "ContactMessage",
    "ContactMessageStatus",
]
