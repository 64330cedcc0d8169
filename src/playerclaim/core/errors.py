from __future__ import annotations

from enum import Enum


class PlayerClaimError(Exception):
    """Base error for all user-facing playerclaim exceptions."""


class ConfigurationError(PlayerClaimError):
    """Raised when configuration is invalid or incomplete."""


class ProjectNotInitializedError(PlayerClaimError):
    """Raised when .playerclaim metadata is missing."""


class ErrorKind(str, Enum):
    """Closed set of failure kinds surfaced by claim lifecycle operations."""

    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    ATTEMPTS_EXHAUSTED = "attempts_exhausted"
    VALIDATION_FAILED = "validation_failed"
    INVALID_INPUT = "invalid_input"
    SERVICE_UNAVAILABLE = "service_unavailable"
    INTERNAL_ERROR = "internal_error"


class ClaimFlowError(PlayerClaimError):
    """Base for lifecycle failures. Callers dispatch on `kind`."""

    kind: ErrorKind = ErrorKind.INTERNAL_ERROR


class ForbiddenError(ClaimFlowError):
    """Role or ownership is insufficient for the requested operation."""

    kind = ErrorKind.FORBIDDEN


class NotFoundError(ClaimFlowError):
    """A referenced user, player or claim does not exist."""

    kind = ErrorKind.NOT_FOUND


class ConflictError(ClaimFlowError):
    """A state-machine precondition no longer holds."""

    kind = ErrorKind.CONFLICT


class AttemptsExhaustedError(ClaimFlowError):
    """The user has used every claim attempt. Not retriable."""

    kind = ErrorKind.ATTEMPTS_EXHAUSTED


class ValidationFailedError(ClaimFlowError):
    """The identity authority answered that the declared identity does not match."""

    kind = ErrorKind.VALIDATION_FAILED


class InvalidInputError(ClaimFlowError):
    """Request data is malformed or out of range."""

    kind = ErrorKind.INVALID_INPUT


class ServiceUnavailableError(ClaimFlowError):
    """The identity authority could not be reached in strict mode."""

    kind = ErrorKind.SERVICE_UNAVAILABLE


class InternalError(ClaimFlowError):
    """Unexpected storage failure; the surrounding transaction was rolled back."""

    kind = ErrorKind.INTERNAL_ERROR


class ProviderUnavailableError(PlayerClaimError):
    """Raised by verification providers when the authority cannot answer.

    Distinct from a negative verification result, which is returned as False.
    """
