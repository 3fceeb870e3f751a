from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union
from urllib.parse import urlparse

from ..common.images import parse_data_url


@dataclass(frozen=True)
class VerificationVerdict:
    """What the vision service concluded about a captured selfie."""

    verified: bool
    identity_score: int
    message: str
    uniform_compliant: bool
    uniform_details: str

    @classmethod
    def from_payload(cls, payload: dict) -> "VerificationVerdict":
        """Build from the service JSON (camelCase keys), filling gaps conservatively."""
        try:
            score = int(round(float(payload.get("identityScore") or 0)))
        except (TypeError, ValueError):
            score = 0
        uniform_ok = payload.get("uniformCompliant")
        return cls(
            verified=bool(payload.get("verified") or False),
            identity_score=max(0, min(100, score)),
            message=str(payload.get("message") or "No se pudo verificar."),
            uniform_compliant=True if uniform_ok is None else bool(uniform_ok),
            uniform_details=str(payload.get("uniformDetails") or "No se pudo analizar la vestimenta."),
        )

    @classmethod
    def technical_failure(cls) -> "VerificationVerdict":
        return cls(
            verified=False,
            identity_score=0,
            message="Error técnico conectando con servicio de IA.",
            uniform_compliant=False,
            uniform_details="Error de análisis.",
        )

    def to_dict(self) -> dict:
        return {
            "verified": self.verified,
            "identity_score": self.identity_score,
            "message": self.message,
            "uniform_compliant": self.uniform_compliant,
            "uniform_details": self.uniform_details,
        }


@dataclass(frozen=True)
class StrictComparison:
    """Same-person comparison against a real photograph."""

    selfie: str
    reference: str
    uniform: str


@dataclass(frozen=True)
class LivenessOnly:
    """No usable reference: only check that a live person is in front of the camera."""

    selfie: str
    uniform: str
    reference_hint: str = ""


VerificationRequest = Union[StrictComparison, LivenessOnly]


def is_photographic_reference(reference: str | None, avatar_hosts: Iterable[str] = ()) -> bool:
    """Inline images and hosted photos count; generated avatars and blanks do not."""
    ref = (reference or "").strip()
    if not ref:
        return False
    if ref.startswith("data:"):
        return parse_data_url(ref) is not None
    parsed = urlparse(ref)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return False
    host = parsed.netloc.lower()
    return not any(host == h or host.endswith("." + h) for h in avatar_hosts)


def resolve_request_mode(
    selfie: str,
    reference: str | None,
    uniform: str,
    *,
    avatar_hosts: Iterable[str] = (),
) -> VerificationRequest:
    if is_photographic_reference(reference, avatar_hosts):
        return StrictComparison(selfie=selfie, reference=(reference or "").strip(), uniform=uniform)
    return LivenessOnly(selfie=selfie, uniform=uniform, reference_hint=(reference or "").strip())
