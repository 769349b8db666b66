"""Exception taxonomy for the assignment engine."""

from typing import Optional


class AssignmentEngineError(Exception):
    """Base class for all assignment engine errors."""


class NotFoundError(AssignmentEngineError, LookupError):
    """
    Raised when a referenced person, supervisor or assignment does not exist.

    Attributes:
        entity: Kind of entity that was looked up (e.g., 'person')
        entity_id: Identifier that was not found
    """

    def __init__(self, entity: str, entity_id: Optional[str] = None):
        self.entity = entity
        self.entity_id = entity_id
        if entity_id is None:
            message = f"{entity.capitalize()} not found"
        else:
            message = f"{entity.capitalize()} not found: {entity_id}"
        super().__init__(message)


class InvalidInputError(AssignmentEngineError, ValueError):
    """Raised when an input value is out of range or malformed."""


class ConcurrencyConflictError(AssignmentEngineError, RuntimeError):
    """Raised when a conflicting write is already in progress."""
