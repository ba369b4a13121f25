"""Repository for the User aggregate."""

from marketplace.domain import marketplace
from marketplace.identity.user import User
from marketplace.shared.email import normalize_email


@marketplace.repository(part_of=User)
class UserRepository:
    def find_by_email(self, email: str) -> User | None:
        """Case-insensitive lookup; emails are stored normalised."""
        results = self._dao.query.filter(email=normalize_email(email)).all()
        return results.first if results and results.items else None
