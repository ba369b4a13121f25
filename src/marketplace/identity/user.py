"""User aggregate — the identity every cart, store and order hangs off.

A guest checkout provisions a User too: it has no password hash and is not
verified, which is the only thing that tells it apart from a real account.
Users are never deleted, only deactivated.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, String
from werkzeug.security import check_password_hash, generate_password_hash

from marketplace.domain import marketplace
from marketplace.identity.events import (
    GuestUserProvisioned,
    UserDeactivated,
    UserEmailVerified,
    UserRegistered,
)
from marketplace.shared.email import EmailAddress, normalize_email

MIN_PASSWORD_LENGTH = 8


class UserRole(Enum):
    CONSUMER = "consumer"
    SELLER_ADMIN = "seller_admin"
    SYSTEM_ADMIN = "system_admin"


@marketplace.aggregate
class User:
    email = String(required=True, max_length=254, unique=True)
    first_name = String(required=True, max_length=50)
    last_name = String(required=True, max_length=50)
    password_hash = String(max_length=255)
    email_verified = Boolean(default=False)
    role = String(choices=UserRole, default=UserRole.CONSUMER.value)
    is_active = Boolean(default=True)
    registered_at = DateTime()
    verified_at = DateTime()

    # -------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------
    @classmethod
    def register(cls, email, first_name, last_name, password, role=UserRole.CONSUMER.value):
        """Create a real account with a password credential."""
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError({"password": [f"Password must be at least {MIN_PASSWORD_LENGTH} characters"]})

        address = normalize_email(email)
        EmailAddress(address=address)
        now = datetime.now(UTC)

        user = cls(
            email=address,
            first_name=first_name,
            last_name=last_name,
            password_hash=generate_password_hash(password),
            role=role,
            registered_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=str(user.id),
                email=address,
                first_name=first_name,
                last_name=last_name,
                role=role,
                registered_at=now,
            )
        )
        return user

    @classmethod
    def provision_guest(cls, email, first_name=None, last_name=None):
        """Create the lightweight owner of a guest order. No credential, unverified."""
        address = normalize_email(email)
        EmailAddress(address=address)
        now = datetime.now(UTC)

        user = cls(
            email=address,
            first_name=(first_name or "").strip() or "Guest",
            last_name=(last_name or "").strip() or "User",
            email_verified=False,
            role=UserRole.CONSUMER.value,
            registered_at=now,
        )
        user.raise_(
            GuestUserProvisioned(
                user_id=str(user.id),
                email=address,
                provisioned_at=now,
            )
        )
        return user

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def is_guest(self) -> bool:
        return not self.password_hash and not self.email_verified

    @property
    def is_system_admin(self) -> bool:
        return self.role == UserRole.SYSTEM_ADMIN.value

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def check_password(self, password) -> bool:
        if not self.password_hash or not password:
            return False
        return check_password_hash(self.password_hash, password)

    # -------------------------------------------------------------------
    # Account lifecycle
    # -------------------------------------------------------------------
    def claim(self, first_name, last_name, password):
        """Turn a guest record into a real account by setting a password."""
        if not self.is_guest:
            raise ValidationError({"email": ["Account already has a password"]})
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError({"password": [f"Password must be at least {MIN_PASSWORD_LENGTH} characters"]})

        now = datetime.now(UTC)
        self.first_name = first_name
        self.last_name = last_name
        self.password_hash = generate_password_hash(password)
        self.raise_(
            UserRegistered(
                user_id=str(self.id),
                email=self.email,
                first_name=first_name,
                last_name=last_name,
                role=self.role,
                registered_at=now,
            )
        )

    def verify_email(self):
        if self.email_verified:
            return

        now = datetime.now(UTC)
        self.email_verified = True
        self.verified_at = now
        self.raise_(UserEmailVerified(user_id=str(self.id), verified_at=now))

    def promote_to_seller(self):
        # Administrators keep their role when they open a store
        if self.role == UserRole.CONSUMER.value:
            self.role = UserRole.SELLER_ADMIN.value

    def deactivate(self):
        if not self.is_active:
            raise ValidationError({"is_active": ["User is already deactivated"]})

        now = datetime.now(UTC)
        self.is_active = False
        self.raise_(UserDeactivated(user_id=str(self.id), deactivated_at=now))
