"""Domain events for the User aggregate."""

from protean.fields import DateTime, Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="User")
class UserRegistered:
    """A shopper or seller created an account with a password."""

    __version__ = 1

    user_id = Identifier(required=True)
    email = String(required=True)
    first_name = String(required=True)
    last_name = String(required=True)
    role = String(required=True)
    registered_at = DateTime(required=True)


@marketplace.event(part_of="User")
class GuestUserProvisioned:
    """A credential-less user was created to own a guest checkout."""

    __version__ = 1

    user_id = Identifier(required=True)
    email = String(required=True)
    provisioned_at = DateTime(required=True)


@marketplace.event(part_of="User")
class UserEmailVerified:
    __version__ = 1

    user_id = Identifier(required=True)
    verified_at = DateTime(required=True)


@marketplace.event(part_of="User")
class UserDeactivated:
    __version__ = 1

    user_id = Identifier(required=True)
    deactivated_at = DateTime(required=True)
