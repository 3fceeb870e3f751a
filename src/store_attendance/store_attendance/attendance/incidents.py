"""Incident classification for a finished attendance capture.

Three independent contributors, always evaluated in this order: identity
failure, location outside ``OK``, advisory marker in the verdict message.
"""

from __future__ import annotations

from typing import Optional

from ..core.constants import ADVISORY_MARKERS, MAX_ALLOWED_DISTANCE_M
from ..core.enums import LocationStatus
from ..geo.model import DistanceEvaluation
from ..verification.model import VerificationVerdict
from .model import Incident

DEFAULT_IDENTITY_INCIDENT = "Incidencia de identidad forzada"


def has_advisory_marker(message: Optional[str]) -> bool:
    text = (message or "").lower()
    return any(marker.lower() in text for marker in ADVISORY_MARKERS)


def identity_reason(verdict: VerificationVerdict, verified: bool) -> Optional[str]:
    if verified:
        return None
    return verdict.message or DEFAULT_IDENTITY_INCIDENT


def location_reason(evaluation: DistanceEvaluation) -> Optional[str]:
    if evaluation.status == LocationStatus.FAR:
        return f"Ubicación lejana ({evaluation.rounded_distance}m > {MAX_ALLOWED_DISTANCE_M}m)"
    if evaluation.status == LocationStatus.ERROR:
        return f"Error GPS: {evaluation.error_message or evaluation.error_code or 'desconocido'}"
    return None


def advisory_reason(verdict: VerificationVerdict) -> Optional[str]:
    if has_advisory_marker(verdict.message):
        return verdict.message
    return None


def classify_incident(
    verdict: VerificationVerdict,
    evaluation: DistanceEvaluation,
    verified: Optional[bool] = None,
) -> Incident:
    """Combine identity, location and advisory signals into one incident.

    ``verified`` defaults to ``verdict.verified``; it is separate so a forced
    acceptance can pass the raw outcome explicitly.
    """
    if verified is None:
        verified = verdict.verified

    reasons = [
        r
        for r in (
            identity_reason(verdict, verified),
            location_reason(evaluation),
            advisory_reason(verdict),
        )
        if r
    ]
    if not reasons:
        return Incident(has_incident=False)
    return Incident(has_incident=True, detail=". ".join(reasons))
