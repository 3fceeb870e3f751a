from __future__ import annotations

import logging
from typing import Iterable

from ..core.constants import DEFAULT_UNIFORM, LIVENESS_ADVISORY_MESSAGE
from ..users.model import UserProfile
from .client import VisionClient, image_part, text_part
from .model import LivenessOnly, StrictComparison, VerificationRequest, VerificationVerdict, resolve_request_mode
from .prompts import LIVENESS_PROMPT, STRICT_PROMPT

logger = logging.getLogger(__name__)


class VerificationService:
    """Adapter to the vision model. ``verify`` never raises."""

    def __init__(self, client: VisionClient, *, avatar_hosts: Iterable[str] = ()):
        self._client = client
        self._avatar_hosts = tuple(h.lower() for h in avatar_hosts)

    def request_for(self, selfie: str, user: UserProfile) -> VerificationRequest:
        return resolve_request_mode(
            selfie,
            user.photo_url,
            user.required_uniform or DEFAULT_UNIFORM,
            avatar_hosts=self._avatar_hosts,
        )

    def verify(self, request: VerificationRequest) -> VerificationVerdict:
        try:
            if isinstance(request, StrictComparison):
                return self._verify_strict(request)
            return self._verify_liveness(request)
        except Exception:
            logger.exception("identity verification failed (%s)", type(request).__name__)
            return VerificationVerdict.technical_failure()

    def _verify_strict(self, request: StrictComparison) -> VerificationVerdict:
        parts = [
            image_part(request.selfie),
            image_part(request.reference),
            text_part(STRICT_PROMPT.format(uniform=request.uniform)),
        ]
        return VerificationVerdict.from_payload(self._client.generate_json(parts))

    def _verify_liveness(self, request: LivenessOnly) -> VerificationVerdict:
        parts = [
            image_part(request.selfie),
            text_part(
                LIVENESS_PROMPT.format(
                    reference_hint=request.reference_hint or "sin foto",
                    advisory=LIVENESS_ADVISORY_MESSAGE,
                    uniform=request.uniform,
                )
            ),
        ]
        verdict = VerificationVerdict.from_payload(self._client.generate_json(parts))
        if not verdict.verified:
            return verdict
        # Without a reference the score is 100 by convention and the advisory is mandatory.
        return VerificationVerdict(
            verified=True,
            identity_score=100,
            message=LIVENESS_ADVISORY_MESSAGE,
            uniform_compliant=verdict.uniform_compliant,
            uniform_details=verdict.uniform_details,
        )
