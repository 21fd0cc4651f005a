"""
Error taxonomy for blogstore operations
"""


class BlogStoreError(Exception):
    """Base class for every error raised by blogstore"""


class NotFoundError(BlogStoreError):
    """A lookup by identifier matched no live row"""

    def __init__(self, entity: str, identifier=None):
        self.entity = entity
        self.identifier = identifier
        if identifier is None:
            message = f"No {entity} found"
        else:
            message = f"{entity} {identifier} not found"
        super().__init__(message)


class ConstraintViolationError(BlogStoreError):
    """Uniqueness, not-null or foreign key constraint failed on write"""


class AggregateUpdateError(BlogStoreError):
    """A derived field (post count, comment status) could not be updated"""

    def __init__(self, aggregate: str, entity: str, identifier, reason: str = ""):
        self.aggregate = aggregate
        self.entity = entity
        self.identifier = identifier
        message = f"Failed to update {aggregate} of {entity} {identifier}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ConnectionFailureError(BlogStoreError):
    """Store connection or schema migration failed at startup"""
