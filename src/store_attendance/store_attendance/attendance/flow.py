"""Attendance state machine.

Credentials -> StoreSelection -> CheckingLocation -> ClockSelection -> Camera
-> Verifying -> Uploading -> SuccessEntry | SuccessExit, with
VerificationFailed offering retry, forced acceptance or cancellation.

Every external wait is represented by a ``PendingRequest``. The generation is
bumped on each transition, so a result that arrives after the user moved on
is discarded instead of being applied to a state it was not issued from.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from functools import wraps
from typing import Callable, List, Optional

from ..common.datetime_utils import epoch_ms, now_utc
from ..common.images import parse_data_url
from ..core.constants import SUCCESS_ENTRY_DELAY_SECONDS, SUCCESS_EXIT_DELAY_SECONDS
from ..core.enums import ClockType, FlowStep, LocationStatus, RequestKind
from ..core.exceptions import CaptureUnavailableError, FlowError, ValidationError
from ..core.outcome import Outcome
from ..geo.distance import evaluate_outcome
from ..geo.model import DistanceEvaluation, GeoPosition
from ..storage.evidence import EvidenceStorage
from ..stores.model import Store
from ..stores.repository import StoreRepository
from ..users.model import UserProfile
from ..users.repository import UserRepository
from ..users.service import AuthService
from ..verification.model import VerificationVerdict
from ..verification.service import VerificationService
from .capture import CAMERA_ERROR_MESSAGE, CaptureDevice, CaptureHandle
from .clock_state import ClockOptions, clock_options
from .incidents import classify_incident
from .ledger import AttendanceLedger
from .model import TimeLog

logger = logging.getLogger(__name__)

NO_STORES_MESSAGE = "Usuario sin sucursales asignadas. Contacte a soporte."
UPLOAD_WARNING = "No se pudo subir la foto. Se guardó embebida en el registro."

NEXT_AUTHENTICATE = "authenticate"
NEXT_RESET = "reset"


@dataclass(frozen=True)
class PendingRequest:
    kind: RequestKind
    generation: int
    step: FlowStep

    @classmethod
    def from_dict(cls, data) -> "PendingRequest":
        try:
            return cls(
                kind=RequestKind(data["kind"]),
                generation=int(data["generation"]),
                step=FlowStep(data["step"]),
            )
        except (KeyError, TypeError, ValueError):
            raise ValidationError("Solicitud pendiente inválida.")

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "generation": self.generation, "step": self.step.value}


@dataclass(frozen=True)
class AttendanceReceipt:
    """What the terminal screen shows after a log was produced."""

    log: TimeLog
    photo: Outcome[str]
    persisted: Outcome[TimeLog]
    next: str
    delay_seconds: int
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "log": self.log.to_dict(),
            "photo_status": self.photo.status.value,
            "persist_status": self.persisted.status.value,
            "next": self.next,
            "delay_seconds": self.delay_seconds,
            "warnings": list(self.warnings),
        }


def _synchronized(method):
    @wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper


def location_banner(evaluation: Optional[DistanceEvaluation]) -> Optional[str]:
    if evaluation is None or evaluation.status == LocationStatus.OK:
        return None
    if evaluation.status == LocationStatus.FAR:
        return f"Estás a {evaluation.rounded_distance}m de la sucursal. Se registrará una incidencia."
    return f"No se pudo obtener la ubicación ({evaluation.error_message}). Se registrará una incidencia."


def credentials_snapshot() -> dict:
    """The state shown to a browser session that has no live flow."""
    return {
        "step": FlowStep.CREDENTIALS.value,
        "generation": 0,
        "user": None,
        "store": None,
        "location": None,
        "action": None,
        "camera_open": False,
        "camera_error": None,
        "banners": [],
    }


class AttendanceFlow:
    """One browser session's walk through the clock-in/clock-out steps.

    Public operations run under a per-flow reentrant lock.
    """

    def __init__(
        self,
        *,
        users: UserRepository,
        stores: StoreRepository,
        ledger: AttendanceLedger,
        verifier: VerificationService,
        evidence: EvidenceStorage,
        camera: CaptureDevice,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._auth = AuthService(users)
        self._stores = stores
        self._ledger = ledger
        self._verifier = verifier
        self._evidence = evidence
        self._camera = camera
        self._clock = clock

        self._lock = threading.RLock()
        self._step = FlowStep.CREDENTIALS
        self._generation = 0
        self._camera_handle: Optional[CaptureHandle] = None
        self._clear_session()

    def _clear_session(self) -> None:
        self._user: Optional[UserProfile] = None
        self._store: Optional[Store] = None
        self._evaluation: Optional[DistanceEvaluation] = None
        self._action: Optional[ClockType] = None
        self._captured_image: Optional[str] = None
        self._failed_verdict: Optional[VerificationVerdict] = None
        self._camera_error: Optional[str] = None
        self._receipt: Optional[AttendanceReceipt] = None

    # --- state ---

    @property
    def step(self) -> FlowStep:
        return self._step

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def user(self) -> Optional[UserProfile]:
        return self._user

    @property
    def store(self) -> Optional[Store]:
        return self._store

    @property
    def evaluation(self) -> Optional[DistanceEvaluation]:
        return self._evaluation

    @property
    def action(self) -> Optional[ClockType]:
        return self._action

    @property
    def failed_verdict(self) -> Optional[VerificationVerdict]:
        return self._failed_verdict

    @property
    def receipt(self) -> Optional[AttendanceReceipt]:
        return self._receipt

    @property
    def camera_open(self) -> bool:
        return self._camera_handle is not None

    @property
    def camera_error(self) -> Optional[str]:
        return self._camera_error

    def _transition(self, step: FlowStep) -> None:
        logger.debug("attendance flow %s -> %s", self._step.value, step.value)
        self._step = step
        self._generation += 1

    def _require(self, *steps: FlowStep) -> None:
        if self._step not in steps:
            raise FlowError(f"Acción no disponible en el paso actual ({self._step.value}).")

    def _issue(self, kind: RequestKind) -> PendingRequest:
        return PendingRequest(kind=kind, generation=self._generation, step=self._step)

    def is_current(self, ticket: PendingRequest) -> bool:
        return ticket.generation == self._generation and ticket.step == self._step

    # --- credentials / store ---

    @_synchronized
    def submit_credentials(self, username: str, password: str) -> FlowStep:
        self._require(FlowStep.CREDENTIALS)
        user = self._auth.authenticate(username, password)

        if user.is_admin:
            self._user = user
            self._transition(FlowStep.AUTHENTICATED)
            return self._step

        if not user.assigned_store_ids:
            raise ValidationError(NO_STORES_MESSAGE)

        self._user = user
        self._transition(FlowStep.STORE_SELECTION)
        return self._step

    def available_stores(self) -> List[Store]:
        if self._user is None:
            return []
        allowed = set(self._user.assigned_store_ids)
        return [s for s in self._stores.list_all() if s.id in allowed]

    @_synchronized
    def select_store(self, store_id: str) -> PendingRequest:
        """Pick a store and start the single geolocation query."""
        self._require(FlowStep.STORE_SELECTION)
        store = next((s for s in self.available_stores() if s.id == store_id), None)
        if store is None:
            raise ValidationError("La sucursal no está asignada a este usuario.")

        self._store = store
        self._transition(FlowStep.CHECKING_LOCATION)
        return self._issue(RequestKind.GEOLOCATION)

    @_synchronized
    def complete_location(self, ticket: PendingRequest, outcome: Outcome[GeoPosition]) -> bool:
        if ticket.kind != RequestKind.GEOLOCATION or not self.is_current(ticket):
            logger.debug("discarding stale geolocation result (gen %s)", ticket.generation)
            return False

        evaluation = evaluate_outcome(outcome, self._store.lat, self._store.lng)
        if evaluation.status != LocationStatus.OK:
            logger.warning(
                "location %s for %s at %s: %s",
                evaluation.status.value,
                self._user.username,
                self._store.id,
                evaluation.error_message or f"{evaluation.rounded_distance}m",
            )
        self._evaluation = evaluation
        self._transition(FlowStep.CLOCK_SELECTION)
        return True

    # --- action / camera ---

    def clock_options(self) -> ClockOptions:
        if self._user is None:
            return ClockOptions(last_log=None)
        return clock_options(self._ledger.records(), self._user.username)

    @_synchronized
    def select_action(self, action: ClockType) -> None:
        self._require(FlowStep.CLOCK_SELECTION)
        if not self.clock_options().allows(action):
            raise FlowError(f"La acción {action.value} no está habilitada.")

        self._action = action
        self._transition(FlowStep.CAMERA)
        self._open_camera()

    def _open_camera(self) -> None:
        self._camera_error = None
        try:
            self._camera_handle = self._camera.acquire()
        except CaptureUnavailableError as e:
            logger.warning("camera unavailable for %s: %s", self._user.username, e)
            self._camera_handle = None
            self._camera_error = str(e)

    def _release_camera(self) -> None:
        if self._camera_handle is not None:
            self._camera_handle.release()
            self._camera_handle = None

    @_synchronized
    def reopen_camera(self) -> None:
        self._require(FlowStep.CAMERA)
        if self._camera_handle is None:
            self._open_camera()

    @_synchronized
    def camera_failed(self, message: Optional[str] = None) -> None:
        """The client could not open its stream (permission refused or no device)."""
        self._require(FlowStep.CAMERA)
        self._release_camera()
        self._camera_error = message or CAMERA_ERROR_MESSAGE
        logger.warning("camera failed on the client for %s: %s", self._user.username, self._camera_error)

    @_synchronized
    def back(self) -> None:
        """Leave the camera without capturing."""
        self._require(FlowStep.CAMERA)
        self._release_camera()
        self._action = None
        self._camera_error = None
        self._transition(FlowStep.CLOCK_SELECTION)

    # --- verification ---

    @_synchronized
    def begin_verification(self, image_data_url: str) -> PendingRequest:
        self._require(FlowStep.CAMERA)
        if parse_data_url(image_data_url) is None:
            raise ValidationError("La captura no es una imagen válida.")

        self._release_camera()
        self._captured_image = image_data_url
        self._transition(FlowStep.VERIFYING)
        return self._issue(RequestKind.VERIFICATION)

    @_synchronized
    def complete_verification(
        self, ticket: PendingRequest, verdict: VerificationVerdict
    ) -> Optional[AttendanceReceipt]:
        if ticket.kind != RequestKind.VERIFICATION or not self.is_current(ticket):
            logger.debug("discarding stale verification result (gen %s)", ticket.generation)
            return None

        if not verdict.verified:
            logger.info("verification failed for %s: %s", self._user.username, verdict.message)
            self._failed_verdict = verdict
            self._transition(FlowStep.VERIFICATION_FAILED)
            return None

        return self._persist(verdict, verified=True)

    @_synchronized
    def capture_and_verify(self, image_data_url: str) -> FlowStep:
        ticket = self.begin_verification(image_data_url)
        user = self._user
        verdict = self._verifier.verify(self._verifier.request_for(image_data_url, user))
        self.complete_verification(ticket, verdict)
        return self._step

    @_synchronized
    def retry(self) -> None:
        self._require(FlowStep.VERIFICATION_FAILED)
        self._failed_verdict = None
        self._captured_image = None
        self._transition(FlowStep.CAMERA)
        self._open_camera()

    @_synchronized
    def force_accept(self) -> AttendanceReceipt:
        """Persist the failing verdict as-is; the identity failure becomes part of the incident."""
        self._require(FlowStep.VERIFICATION_FAILED)
        logger.warning("forced acceptance by %s (score %s)", self._user.username, self._failed_verdict.identity_score)
        return self._persist(self._failed_verdict, verified=False)

    @_synchronized
    def cancel(self) -> None:
        self._require(FlowStep.VERIFICATION_FAILED)
        self._failed_verdict = None
        self._captured_image = None
        self._action = None
        self._transition(FlowStep.CLOCK_SELECTION)

    # --- persistence ---

    def _upload_photo(self, image: str, username: str) -> Outcome[str]:
        try:
            url = self._evidence.upload(image, username)
        except Exception:
            logger.exception("evidence upload raised for %s", username)
            url = None
        if url:
            return Outcome.success(url)
        logger.warning("evidence upload failed for %s, embedding image", username)
        return Outcome.degraded(image, UPLOAD_WARNING)

    def _persist(self, verdict: VerificationVerdict, *, verified: bool) -> Optional[AttendanceReceipt]:
        # A reset during the upload must not change the log being written.
        user, store, evaluation = self._user, self._store, self._evaluation
        action, image = self._action, self._captured_image

        self._transition(FlowStep.UPLOADING)
        ticket = self._issue(RequestKind.UPLOAD)

        photo = self._upload_photo(image, user.username)
        incident = classify_incident(verdict, evaluation, verified)
        now = self._clock()
        log = TimeLog(
            id=f"log-{epoch_ms(now)}-{user.username}",
            user_id=user.username,
            user_full_name=user.full_name,
            user_photo_url=photo.value,
            store_id=store.id,
            store_name=store.name,
            type=action,
            timestamp=now,
            has_incident=incident.has_incident,
            incident_detail=incident.detail,
            identity_score=verdict.identity_score,
            uniform_compliant=verdict.uniform_compliant,
            uniform_details=verdict.uniform_details,
            location=evaluation.position,
            distance_to_store=evaluation.rounded_distance,
            location_allowed=evaluation.allowed,
        )
        persisted = self._ledger.append(log)

        if not self.is_current(ticket):
            logger.info("upload finished after the flow moved on; log %s kept", log.id)
            return None

        warnings = tuple(o.reason for o in (photo, persisted) if not o.ok and o.reason)
        if action == ClockType.INGRESO:
            receipt = AttendanceReceipt(log, photo, persisted, NEXT_AUTHENTICATE, SUCCESS_ENTRY_DELAY_SECONDS, warnings)
            self._transition(FlowStep.SUCCESS_ENTRY)
        else:
            receipt = AttendanceReceipt(log, photo, persisted, NEXT_RESET, SUCCESS_EXIT_DELAY_SECONDS, warnings)
            self._transition(FlowStep.SUCCESS_EXIT)

        logger.info("time log %s %s for %s (incident=%s)", log.id, log.type.value, log.user_id, log.has_incident)
        self._receipt = receipt
        self._failed_verdict = None
        self._captured_image = None
        return receipt

    # --- terminal ---

    @_synchronized
    def finish(self) -> FlowStep:
        """Apply the terminal auto-advance: entry keeps the session, exit resets it."""
        self._require(FlowStep.SUCCESS_ENTRY, FlowStep.SUCCESS_EXIT)
        if self._step == FlowStep.SUCCESS_ENTRY:
            self._transition(FlowStep.AUTHENTICATED)
        else:
            self.reset()
        return self._step

    @_synchronized
    def reset(self) -> None:
        self._release_camera()
        self._clear_session()
        self._transition(FlowStep.CREDENTIALS)

    @_synchronized
    def close(self) -> None:
        self._release_camera()

    def banners(self) -> List[str]:
        """Non-blocking messages shown next to the normal screen."""
        out = []
        banner = location_banner(self._evaluation)
        if banner and self._step in (FlowStep.CLOCK_SELECTION, FlowStep.CAMERA, FlowStep.VERIFICATION_FAILED):
            out.append(banner)
        if self._receipt and self._step in (FlowStep.SUCCESS_ENTRY, FlowStep.SUCCESS_EXIT):
            out.extend(self._receipt.warnings)
        return out

    @_synchronized
    def snapshot(self) -> dict:
        data = {
            "step": self._step.value,
            "generation": self._generation,
            "user": self._user.public_dict() if self._user else None,
            "store": self._store.to_dict() if self._store else None,
            "location": self._evaluation.to_dict() if self._evaluation else None,
            "action": self._action.value if self._action else None,
            "camera_open": self.camera_open,
            "camera_error": self._camera_error,
            "banners": self.banners(),
        }
        if self._step == FlowStep.STORE_SELECTION:
            data["stores"] = [s.to_dict() for s in self.available_stores()]
        if self._step == FlowStep.CLOCK_SELECTION:
            data["clock_options"] = self.clock_options().to_dict()
        if self._step == FlowStep.VERIFICATION_FAILED and self._failed_verdict:
            data["verdict"] = self._failed_verdict.to_dict()
        if self._step in (FlowStep.SUCCESS_ENTRY, FlowStep.SUCCESS_EXIT) and self._receipt:
            data["receipt"] = self._receipt.to_dict()
        return data
