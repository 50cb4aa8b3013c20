# errors.py


class CRMError(Exception):
    """Base class for every error raised by the CRM services."""


class InvalidInputError(CRMError):
    """
    A required field is missing or malformed. Raised before anything is
    sent to the database.
    """

    def __init__(self, message, fields=None):
        super().__init__(message)
        self.fields = fields or {}


class AuthorizationError(CRMError):
    """
    No actor on the session, or the actor's role lacks the capability.
    """

    def __init__(self, message, unauthenticated=False):
        super().__init__(message)
        self.unauthenticated = unauthenticated


class NotFoundError(CRMError):
    """A mutation targeted an entity that does not exist."""

    def __init__(self, entity, entity_id):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class BackendError(CRMError):
    """The database rejected or failed a request. Never retried."""
