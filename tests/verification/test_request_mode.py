import pytest

from store_attendance.verification.model import (
    LivenessOnly,
    StrictComparison,
    VerificationVerdict,
    is_photographic_reference,
    resolve_request_mode,
)

AVATARS = ("ui-avatars.com",)
SELFIE = "data:image/jpeg;base64,AAAA"


@pytest.mark.parametrize(
    "reference",
    [
        "https://photos.example.com/juan.jpg",
        "http://intranet.local/legajos/17.png",
        "data:image/png;base64,iVBORw0KGgo=",
    ],
)
def test_real_photographs_use_strict_comparison(reference):
    request = resolve_request_mode(SELFIE, reference, "Buzo negro", avatar_hosts=AVATARS)
    assert isinstance(request, StrictComparison)
    assert request.reference == reference
    assert request.uniform == "Buzo negro"


@pytest.mark.parametrize(
    "reference",
    [
        "",
        None,
        "   ",
        "https://ui-avatars.com/api/?name=Juan",
        "https://cdn.ui-avatars.com/api/?name=Juan",
        "ftp://photos.example.com/juan.jpg",
        "data:text/plain,hola",
    ],
)
def test_missing_or_generated_references_use_liveness(reference):
    request = resolve_request_mode(SELFIE, reference, "Buzo negro", avatar_hosts=AVATARS)
    assert isinstance(request, LivenessOnly)


def test_avatar_host_check_is_exact_or_subdomain():
    assert is_photographic_reference("https://not-ui-avatars.com/a.png", AVATARS)


def test_payload_defaults_are_conservative():
    verdict = VerificationVerdict.from_payload({})
    assert verdict.verified is False
    assert verdict.identity_score == 0
    assert verdict.message == "No se pudo verificar."
    assert verdict.uniform_compliant is True
    assert verdict.uniform_details == "No se pudo analizar la vestimenta."


def test_payload_score_is_clamped():
    assert VerificationVerdict.from_payload({"identityScore": 140}).identity_score == 100
    assert VerificationVerdict.from_payload({"identityScore": -3}).identity_score == 0
    assert VerificationVerdict.from_payload({"identityScore": "87.6"}).identity_score == 88
    assert VerificationVerdict.from_payload({"identityScore": "n/a"}).identity_score == 0
