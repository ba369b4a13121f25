"""EmailAddress value object for validated email addresses."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from marketplace.domain import marketplace

_FORBIDDEN = (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\")


@marketplace.value_object
class EmailAddress:
    """A structurally valid email address.

    Checks shape only: a single ``@``, non-empty local and domain parts, a
    dotted domain without leading/trailing dots or hyphens, no whitespace and
    no forbidden characters. Deliverability is never checked.
    """

    address = String(required=True, max_length=254)

    @invariant.post
    def verify_email_address(self):
        email = self.address or ""

        if any(ch.isspace() for ch in email) or email.count("@") != 1:
            raise ValidationError({"address": [f"Invalid email address: {email!r}"]})

        local_part, domain_part = email.split("@", 1)

        if not local_part or local_part.startswith(".") or local_part.endswith("."):
            raise ValidationError({"address": [f"Invalid email address: {email!r}"]})

        if not domain_part or "." not in domain_part or domain_part.startswith(".") or domain_part.endswith("."):
            raise ValidationError({"address": [f"Invalid email address: {email!r}"]})

        if any(label.startswith("-") or label.endswith("-") for label in domain_part.split(".")):
            raise ValidationError({"address": [f"Invalid email address: {email!r}"]})

        if ".." in email or any(ch in email for ch in _FORBIDDEN):
            raise ValidationError({"address": [f"Invalid email address: {email!r}"]})


def normalize_email(email: str) -> str:
    """Canonical form used for storage and lookups: trimmed and lower-cased."""
    return (email or "").strip().lower()


def is_valid_email(email: str) -> bool:
    try:
        EmailAddress(address=email)
    except (ValueError, ValidationError):
        return False
    return True
