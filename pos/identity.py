import logging

from .domain import ActingUser
from .models import Role, StaffMember

logger = logging.getLogger(__name__)


class PosError(Exception):
    """Base class for POS errors surfaced to the operator"""


class IdentityError(PosError):
    """The acting user cannot operate the POS"""


def resolve_acting_user(staff_id):
    """
    Resolve the operator of a POS session from the staff registry

    Args:
        staff_id: StaffMember primary key supplied by the session component

    Returns:
        ActingUser for an active staff member with a registered role

    Raises:
        IdentityError: unknown or inactive staff member, or unregistered role
    """
    member = StaffMember.objects.filter(pk=staff_id).first()
    if member is None:
        raise IdentityError(f"Unknown staff member {staff_id}")

    if not member.active:
        raise IdentityError(f"Staff member {member.name} is inactive")

    if not Role.objects.filter(name=member.role).exists():
        logger.warning("Staff member %s has unregistered role %r", member.pk, member.role)
        raise IdentityError(f"Invalid role {member.role!r}")

    return ActingUser(id=member.pk, name=member.name, role=member.role)
