"""Assignment persistence."""

from .assignment_store import AssignmentStore

__all__ = ["AssignmentStore"]
