"""Domain exceptions.

Translated into HTTP responses by ``peerlearn.middleware.error_handler``.
Plain ``ValueError`` is used for input that fails a business rule; routers
turn it into a 400.
"""

from __future__ import annotations


class PeerLearnError(Exception):
    """Base class for domain errors."""


class PermissionDeniedError(PeerLearnError):
    """A write was rejected by the access-control predicate table."""

    def __init__(self, table: str, action: str) -> None:
        self.table = table
        self.action = action
        super().__init__(f"Not allowed to {action} {table}")


class NotFoundError(PeerLearnError):
    """The target row does not exist or is not visible to the principal."""

    def __init__(self, entity: str, entity_id: str) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class ReferentialIntegrityError(PeerLearnError):
    """A row referenced by the operation disappeared mid-transaction."""


class AlreadyExistsError(PeerLearnError):
    """A row with the same natural key already exists."""
