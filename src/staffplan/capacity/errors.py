"""
Capacity error taxonomy.

Every failure is raised to the immediate caller; nothing here is retried.
"""


class CapacityError(Exception):
    """Base class for capacity engine errors."""


class ValidationError(CapacityError, ValueError):
    """Allocation percent outside [0, 200] or a start date after its end date."""


class NotFoundError(CapacityError, LookupError):
    """An allocation id or snapshot week that does not exist."""


class StoreError(CapacityError):
    """The persistence layer failed; the original driver error is chained."""
