"""Finding or provisioning the user behind a guest checkout."""

from protean.utils.globals import current_domain

from marketplace.errors import InvalidEmail
from marketplace.identity.user import User
from marketplace.shared.email import is_valid_email, normalize_email
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


def resolve_guest_user(email, first_name=None, last_name=None) -> User:
    """Return the user owning ``email``, creating a guest record if none exists.

    An existing account is reused whether or not it is verified, and its
    names are left alone. The new record is added to the current unit of work,
    so it disappears with the rest of the checkout if anything later fails.
    """
    address = normalize_email(email)
    if not is_valid_email(address):
        raise InvalidEmail(email)

    repo = current_domain.repository_for(User)
    user = repo.find_by_email(address)
    if user is not None:
        return user

    user = User.provision_guest(address, first_name=first_name, last_name=last_name)
    repo.add(user)
    logger.info("guest_user_provisioned", user_id=str(user.id))
    return user
