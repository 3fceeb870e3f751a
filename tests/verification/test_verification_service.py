from dataclasses import replace

from conftest import FakeVisionClient, verdict_payload
from store_attendance.core.constants import LIVENESS_ADVISORY_MESSAGE
from store_attendance.verification.model import LivenessOnly, StrictComparison
from store_attendance.verification.service import VerificationService

SELFIE = "data:image/jpeg;base64,AAAA"


def test_strict_verdict_is_taken_from_the_model():
    vision = FakeVisionClient(verdict_payload(verified=False, score=8, message="Otra persona"))
    service = VerificationService(vision)

    verdict = service.verify(StrictComparison(SELFIE, "https://photos.example.com/j.jpg", "Buzo negro"))
    assert verdict.verified is False
    assert verdict.identity_score == 8
    assert verdict.message == "Otra persona"
    prompt = vision.calls[0][-1]["text"]
    assert "Buzo negro" in prompt


def test_liveness_verdict_forces_score_and_advisory():
    vision = FakeVisionClient(verdict_payload(verified=True, score=55, message="Humano"))
    verdict = VerificationService(vision).verify(LivenessOnly(SELFIE, "Saco"))
    assert verdict.verified is True
    assert verdict.identity_score == 100
    assert verdict.message == LIVENESS_ADVISORY_MESSAGE


def test_liveness_rejection_is_passed_through():
    vision = FakeVisionClient(verdict_payload(verified=False, score=0, message="No se detecta una persona"))
    verdict = VerificationService(vision).verify(LivenessOnly(SELFIE, "Saco"))
    assert verdict.verified is False
    assert verdict.message == "No se detecta una persona"


def test_transport_errors_become_a_technical_verdict():
    vision = FakeVisionClient(ConnectionError("boom"))
    verdict = VerificationService(vision).verify(LivenessOnly(SELFIE, "Saco"))
    assert verdict.verified is False
    assert verdict.identity_score == 0
    assert verdict.message == "Error técnico conectando con servicio de IA."


def test_unparseable_answers_become_a_technical_verdict():
    vision = FakeVisionClient(ValueError("Expecting value"))
    verdict = VerificationService(vision).verify(StrictComparison(SELFIE, "https://x.example.com/a.jpg", "Saco"))
    assert verdict.message == "Error técnico conectando con servicio de IA."


def test_request_for_uses_default_uniform(juan):
    service = VerificationService(FakeVisionClient(), avatar_hosts=("ui-avatars.com",))
    profile = replace(juan, required_uniform=None)
    request = service.request_for(SELFIE, profile)
    assert isinstance(request, StrictComparison)
    assert request.uniform == "Buzo o campera negra"


def test_hosted_reference_that_cannot_be_fetched_is_a_technical_failure(juan):
    vision = FakeVisionClient(RuntimeError("Failed to fetch image from URL"))
    service = VerificationService(vision, avatar_hosts=("ui-avatars.com",))

    request = service.request_for(SELFIE, juan)
    assert isinstance(request, StrictComparison)
    assert request.reference == "https://photos.example.com/juan.jpg"

    verdict = service.verify(request)
    assert verdict.verified is False
    assert verdict.identity_score == 0
    assert verdict.message == "Error técnico conectando con servicio de IA."
    images = [p["image_url"]["url"] for p in vision.calls[0] if p["type"] == "image_url"]
    assert images == [SELFIE, "https://photos.example.com/juan.jpg"]
