"""Account lifecycle — email verification and deactivation."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.identity.user import User


@marketplace.command(part_of="User")
class VerifyUserEmail:
    user_id = Identifier(required=True)


@marketplace.command(part_of="User")
class DeactivateUser:
    user_id = Identifier(required=True)


@marketplace.command_handler(part_of=User)
class AccountHandler:
    @handle(VerifyUserEmail)
    def verify_email(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.verify_email()
        repo.add(user)

    @handle(DeactivateUser)
    def deactivate(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.deactivate()
        repo.add(user)
