"""Exercise catalogue storage."""

from .repository import (
    DatabaseConnectionError,
    DatabaseError,
    ExerciseDatabase,
    ReadOnlyError,
)

__all__ = ["DatabaseConnectionError", "DatabaseError", "ExerciseDatabase", "ReadOnlyError"]
