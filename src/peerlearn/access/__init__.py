"""Access control: principal + predicate table."""

from peerlearn.access.policies import (
    POLICIES,
    Action,
    authorize,
    can_read,
    filter_readable,
    is_allowed,
)
from peerlearn.access.principal import Principal, load_principal, principal_from_user

__all__ = [
    "POLICIES",
    "Action",
    "Principal",
    "authorize",
    "can_read",
    "filter_readable",
    "is_allowed",
    "load_principal",
    "principal_from_user",
]
