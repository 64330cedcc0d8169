from __future__ import annotations

import logging
from enum import Enum

from playerclaim.core.errors import ProviderUnavailableError, ServiceUnavailableError
from playerclaim.domain.models.identity import DeclaredIdentity
from playerclaim.infrastructure.verification.kps_client import VerificationProvider

logger = logging.getLogger(__name__)


class VerificationMode(str, Enum):
    STRICT = "strict"
    PERMISSIVE = "permissive"


class VerificationProviderAdapter:
    """Applies the deployment's unavailability policy to a provider call.

    strict: an unreachable authority aborts with ServiceUnavailableError.
    permissive: an unreachable authority counts as verified. Only for
    non-production deployments.
    """

    def __init__(self, provider: VerificationProvider, mode: VerificationMode | str = VerificationMode.STRICT) -> None:
        self.provider = provider
        self.mode = VerificationMode(mode)

    def check(self, declared: DeclaredIdentity) -> bool:
        try:
            return self.provider.verify(
                declared.national_id,
                declared.first_name,
                declared.last_name,
                declared.birth_year,
            )
        except ProviderUnavailableError as exc:
            if self.mode is VerificationMode.PERMISSIVE:
                logger.warning("Identity authority unavailable, treating as verified (permissive mode): %s", exc)
                return True
            logger.warning("Identity authority unavailable: %s", exc)
            raise ServiceUnavailableError(
                "Identity verification service is currently unavailable. Please try again later."
            ) from exc
