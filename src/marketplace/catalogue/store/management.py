"""Store management — open, verify, activate/deactivate."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.catalogue.store.store import Store
from marketplace.domain import marketplace
from marketplace.errors import UserNotFound
from marketplace.identity.user import User
from marketplace.shared.slug import unique_slug


@marketplace.command(part_of="Store")
class OpenStore:
    owner_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    description = Text()
    commission_rate = Float(default=0.10)


@marketplace.command(part_of="Store")
class VerifyStore:
    store_id = Identifier(required=True)


@marketplace.command(part_of="Store")
class ChangeStoreStatus:
    store_id = Identifier(required=True)
    is_active = Boolean(required=True)


@marketplace.repository(part_of=Store)
class StoreRepository:
    def find_by_slug(self, slug: str) -> Store | None:
        results = self._dao.query.filter(slug=slug).all()
        return results.first if results and results.items else None

    def find_by_owner(self, owner_id) -> Store | None:
        results = self._dao.query.filter(owner_id=str(owner_id)).all()
        return results.first if results and results.items else None


@marketplace.command_handler(part_of=Store)
class StoreManagementHandler:
    @handle(OpenStore)
    def open_store(self, command):
        user_repo = current_domain.repository_for(User)
        try:
            owner = user_repo.get(command.owner_id)
        except ObjectNotFoundError:
            raise UserNotFound() from None

        repo = current_domain.repository_for(Store)
        if repo.find_by_owner(owner.id) is not None:
            raise ValidationError({"owner_id": ["User already owns a store"]})

        store = Store.open(
            owner_id=owner.id,
            name=command.name,
            slug=unique_slug(command.name, lambda s: repo.find_by_slug(s) is not None),
            description=command.description,
            commission_rate=command.commission_rate if command.commission_rate is not None else 0.10,
        )
        repo.add(store)

        owner.promote_to_seller()
        user_repo.add(owner)
        return str(store.id)

    @handle(VerifyStore)
    def verify_store(self, command):
        repo = current_domain.repository_for(Store)
        store = repo.get(command.store_id)
        store.verify()
        repo.add(store)

    @handle(ChangeStoreStatus)
    def change_status(self, command):
        repo = current_domain.repository_for(Store)
        store = repo.get(command.store_id)
        store.set_active(command.is_active)
        repo.add(store)
