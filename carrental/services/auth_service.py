"""
Account registration, password login and JWT handling.

Passwords are hashed with bcrypt; access tokens are HS256 JWTs carrying the
user's email (``sub``), id and role.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from carrental.config import settings
from carrental.models.booking import Booking
from carrental.models.complaint import Complaint
from carrental.models.review import Review
from carrental.models.user import User, UserRole, UserStatus
from carrental.models.vehicle import Vehicle
from carrental.services.authorization import Actor, Capability, authorize
from carrental.utils.exceptions import AuthenticationError, ConflictError, ForbiddenError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def hash_password(plain_password: str) -> str:
    if not isinstance(plain_password, str) or len(plain_password) == 0:
        raise ValidationError("Password must be a non-empty string", field="password")

    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(plain_password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    if not plain_password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def create_access_token(user: User, now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    claims = {
        "sub": user.email,
        "user_id": user.id,
        "role": user.role,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=settings.jwt_expiration_minutes)).timestamp()),
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict:
    """Verify signature and expiry; raise AuthenticationError otherwise."""
    try:
        claims = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        logger.debug(f"Rejected access token: {e}")
        raise AuthenticationError("Invalid or expired token")

    if not claims.get("sub") or claims.get("user_id") is None:
        raise AuthenticationError("Invalid or expired token")
    return claims


class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == (email or "").strip().lower()).first()

    def get_user(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("User", user_id)
        return user

    def register(
        self,
        name: str,
        email: str,
        password: str,
        role: UserRole = UserRole.CUSTOMER,
        phone_no: Optional[str] = None,
        license_no: Optional[str] = None,
        address: Optional[str] = None,
    ) -> User:
        if role is UserRole.ADMIN:
            raise ValidationError("Administrator accounts cannot be self-registered", field="role")

        email_norm = (email or "").strip().lower()
        if self.get_user_by_email(email_norm):
            raise ConflictError("Email already registered", field="email")

        user = User(
            name=name.strip(),
            email=email_norm,
            password_hash=hash_password(password),
            role=role.value,
            phone_no=phone_no,
            license_no=license_no,
            address=address,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("Email, phone number or license number already registered")
        self.db.refresh(user)

        logger.info(f"Registered {user.role} account {user.email}")
        return user

    def authenticate(self, email: str, password: str) -> User:
        user = self.get_user_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            logger.warning(f"Failed login for {email}")
            raise AuthenticationError("Invalid email or password")
        if user.status == UserStatus.REJECTED.value:
            logger.warning(f"Sign-in refused for rejected account {user.email}")
            raise ForbiddenError("This account has been rejected by an administrator")
        return user

    def login(self, email: str, password: str) -> tuple[User, str]:
        user = self.authenticate(email, password)
        return user, create_access_token(user)

    def update_profile(
        self,
        user_id: int,
        name: Optional[str] = None,
        phone_no: Optional[str] = None,
        license_no: Optional[str] = None,
        address: Optional[str] = None,
        password: Optional[str] = None,
        current_password: Optional[str] = None,
    ) -> User:
        user = self.get_user(user_id)

        if password:
            if not current_password:
                raise ValidationError("Current password is required to update password", field="current_password")
            if not verify_password(current_password, user.password_hash):
                raise ValidationError("Current password is incorrect", field="current_password")
            user.password_hash = hash_password(password)

        if name:
            user.name = name.strip()

        if phone_no and phone_no != user.phone_no:
            taken = self.db.query(User).filter(User.phone_no == phone_no, User.id != user.id).first()
            if taken:
                raise ConflictError("Phone number already exists", field="phone_no")
            user.phone_no = phone_no

        if license_no and license_no != user.license_no:
            taken = self.db.query(User).filter(User.license_no == license_no, User.id != user.id).first()
            if taken:
                raise ConflictError("License number already exists", field="license_no")
            user.license_no = license_no

        if address is not None:
            user.address = address.strip() or None

        self.db.commit()
        self.db.refresh(user)
        return user

    def list_users(self, actor: Actor, role: Optional[UserRole] = None) -> list[User]:
        authorize(actor, Capability.VIEW_ALL_RECORDS)
        query = self.db.query(User)
        if role is not None:
            query = query.filter(User.role == role.value)
        return query.order_by(User.created_at.desc()).all()

    # Account administration

    def list_pending_users(self, actor: Actor) -> list[User]:
        authorize(actor, Capability.MANAGE_USERS)
        return self.db.query(User).filter(
            User.status == UserStatus.PENDING.value
        ).order_by(User.created_at.asc(), User.id.asc()).all()

    def approve_user(self, actor: Actor, user_id: int) -> User:
        return self._set_status(actor, user_id, UserStatus.APPROVED)

    def reject_user(self, actor: Actor, user_id: int) -> User:
        return self._set_status(actor, user_id, UserStatus.REJECTED)

    def _set_status(self, actor: Actor, user_id: int, status: UserStatus) -> User:
        authorize(actor, Capability.MANAGE_USERS)
        user = self.get_user(user_id)
        if status is UserStatus.REJECTED and user.role == UserRole.ADMIN.value:
            raise ForbiddenError("Administrator accounts cannot be rejected", details={"user_id": user_id})

        user.status = status.value
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"User {user.email} marked {user.status} by {actor.email}")
        return user

    def delete_user(self, actor: Actor, user_id: int) -> None:
        """Administrative delete. Admins, vendors with vehicles and users with
        bookings are refused."""
        authorize(actor, Capability.MANAGE_USERS)
        user = self.get_user(user_id)
        if user.role == UserRole.ADMIN.value:
            raise ForbiddenError("Cannot delete admin users", details={"user_id": user_id})
        self._delete_account(user)
        logger.info(f"User {user_id} deleted by {actor.email}")

    def delete_own_account(self, actor: Actor) -> None:
        authorize(actor, Capability.CLOSE_OWN_ACCOUNT)
        user = self.get_user(actor.user_id)
        self._delete_account(user)
        logger.info(f"User {actor.email} closed their account")

    def _delete_account(self, user: User) -> None:
        vehicles = self.db.query(Vehicle).filter(Vehicle.vendor_id == user.id).count()
        if vehicles:
            raise ConflictError(
                f"Cannot delete user: {vehicles} vehicle(s) registered; delete or transfer them first",
                details={"user_id": user.id, "vehicles": vehicles},
            )
        bookings = self.db.query(Booking).filter(Booking.user_id == user.id).count()
        if bookings:
            raise ConflictError(
                f"Cannot delete user: {bookings} booking(s) on record",
                details={"user_id": user.id, "bookings": bookings},
            )

        # Reviews and complaints are authored content and go with the account
        self.db.query(Review).filter(Review.user_id == user.id).delete(synchronize_session=False)
        self.db.query(Complaint).filter(Complaint.user_id == user.id).delete(synchronize_session=False)
        self.db.delete(user)
        self.db.commit()
