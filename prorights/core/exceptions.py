"""Domain errors raised by the service layer.

Each error carries the HTTP status the API reports it with; the mapping to a
response happens once, in ``prorights.main``.
"""
from fastapi import status


class PROError(Exception):
    """Base class for all domain errors."""
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PROError):
    """Malformed input: negative play count, inverted period, bad role..."""
    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(PROError):
    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDeniedError(PROError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(PROError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class InvalidTransitionError(PROError):
    """A status change not allowed by the entity's lifecycle."""
    status_code = status.HTTP_409_CONFLICT


class DuplicateContributorError(PROError):
    status_code = status.HTTP_409_CONFLICT


class DuplicateRecordError(PROError):
    """A unique field (email, ISWC, ISRC) is already taken."""
    status_code = status.HTTP_409_CONFLICT
