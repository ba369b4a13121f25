"""User registration — command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.identity.user import User, UserRole


@marketplace.command(part_of="User")
class RegisterUser:
    """Create an account with a password credential."""

    email = String(required=True, max_length=254)
    first_name = String(required=True, max_length=50)
    last_name = String(required=True, max_length=50)
    password = String(required=True, max_length=128)
    role = String(choices=UserRole, default=UserRole.CONSUMER.value)


@marketplace.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)

        # A guest record for the same email is not a conflict: the shopper
        # is claiming the account their guest orders already belong to.
        existing = repo.find_by_email(command.email)
        if existing is not None and not existing.is_guest:
            raise ValidationError({"email": ["An account with this email already exists"]})

        if existing is not None:
            existing.claim(
                first_name=command.first_name,
                last_name=command.last_name,
                password=command.password,
            )
            repo.add(existing)
            return str(existing.id)

        user = User.register(
            email=command.email,
            first_name=command.first_name,
            last_name=command.last_name,
            password=command.password,
            role=command.role,
        )
        repo.add(user)
        return str(user.id)
