"""Service layer exception classes for Pack Planner.

This module defines all custom exceptions used by the service layer to provide
consistent error handling across the application.

Exception Hierarchy:
    ServiceError (base)
    ├── ValidationError
    ├── GearNotFound
    ├── HikeNotFound
    ├── HikeGearNotFound
    ├── DanglingReferenceError
    └── DatabaseError
"""


class ServiceError(Exception):
    """Base exception for all service layer errors.

    All service-specific exceptions should inherit from this class.
    """

    pass


class ValidationError(ServiceError):
    """Raised when a caller supplies an out-of-domain value.

    Args:
        errors: List of human-readable validation messages

    Example:
        >>> raise ValidationError(["Quantity: must be at least 1"])
        ValidationError: Validation failed: Quantity: must be at least 1
    """

    def __init__(self, errors: list):
        self.errors = errors
        error_msg = "; ".join(errors)
        super().__init__(f"Validation failed: {error_msg}")


class GearNotFound(ServiceError):
    """Raised when a gear item cannot be found by ID.

    Example:
        >>> raise GearNotFound(12)
        GearNotFound: Gear with ID 12 not found
    """

    def __init__(self, gear_id):
        self.gear_id = gear_id
        super().__init__(f"Gear with ID {gear_id} not found")


class HikeNotFound(ServiceError):
    """Raised when a hike cannot be found by ID."""

    def __init__(self, hike_id):
        self.hike_id = hike_id
        super().__init__(f"Hike with ID {hike_id} not found")


class HikeGearNotFound(ServiceError):
    """Raised when a hike gear assignment cannot be found by ID."""

    def __init__(self, assignment_id):
        self.assignment_id = assignment_id
        super().__init__(f"Hike gear assignment with ID {assignment_id} not found")


class DanglingReferenceError(ServiceError):
    """Raised when an assignment's gear link cannot be resolved.

    Used inside weight aggregation only; the aggregator recovers by
    counting the assignment as zero grams in the "Unknown" category.
    """

    def __init__(self, assignment_id):
        self.assignment_id = assignment_id
        super().__init__(f"Hike gear assignment {assignment_id} references missing gear")


class DatabaseError(ServiceError):
    """Raised when a database operation fails."""

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")
