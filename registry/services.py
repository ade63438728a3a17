import logging
from typing import List, Optional

from pawsitive.errors import Conflict, InvalidInput, NotFound
from pawsitive.transactions import atomic_unit, store_errors

from .models import Pet, Role, User

logger = logging.getLogger(__name__)

# Reference data that must exist before the service takes traffic.
REQUIRED_ROLES = ("Donor", "Admin")


def get_user(user_id: int) -> User:
    try:
        return User.objects.get(pk=user_id)
    except User.DoesNotExist:
        raise NotFound("User not found")


def get_pet(pet_id: int) -> Pet:
    try:
        return Pet.objects.get(pk=pet_id)
    except Pet.DoesNotExist:
        raise NotFound("Pet not found")


def find_pet(pet_id: Optional[int]) -> Optional[Pet]:
    if pet_id is None:
        return None
    return Pet.objects.filter(pk=pet_id).first()


def list_roles() -> List[Role]:
    with store_errors():
        return list(Role.objects.all())


def find_role(name: str) -> Optional[Role]:
    with store_errors():
        return Role.objects.filter(name__iexact=(name or "").strip()).first()


def create_role(name: str) -> Role:
    name = (name or "").strip()
    if not name:
        raise InvalidInput("Role name is required")
    with atomic_unit():
        if Role.objects.filter(name__iexact=name).exists():
            raise Conflict(f"Role {name!r} already exists")
        role = Role.objects.create(name=name)
    logger.info("Created role %s (id=%s)", role.name, role.pk)
    return role


def seed_required_roles(using=None) -> List[str]:
    """
    Create every role in REQUIRED_ROLES that is missing, matching names
    case-insensitively. Returns the names created; a second run returns [].
    """
    created = []
    roles = Role.objects.db_manager(using)
    with atomic_unit(using=using):
        for name in REQUIRED_ROLES:
            if roles.filter(name__iexact=name).exists():
                logger.debug("Role already exists: %s", name)
                continue
            roles.create(name=name)
            created.append(name)
            logger.info("Seeded required role: %s", name)
    return created
