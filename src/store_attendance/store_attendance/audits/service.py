from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Dict, List, Mapping, Sequence

from ..common.datetime_utils import now_utc
from ..core.enums import Role
from ..core.exceptions import AnalysisError, AuthorizationError, ValidationError
from ..storage.evidence import EvidenceStorage
from ..stores.repository import StoreRepository
from ..users.model import UserProfile
from ..verification.client import VisionClient, image_part, text_part
from ..verification.prompts import AUDIT_PROMPT_FOOTER, AUDIT_PROMPT_HEADER
from .model import AuditRecord, AuditReport, Question
from .questions import QUESTIONS, is_complete, prune, question_by_id, validate_photos
from .repository import AuditRepository

logger = logging.getLogger(__name__)

ANALYSIS_ERROR_MESSAGE = (
    "No se pudo generar el reporte. Por favor verifique su conexión e intente nuevamente."
)


class AuditService:
    """Use case: fill, analyse and store a store audit."""

    def __init__(
        self,
        audits: AuditRepository,
        stores: StoreRepository,
        client: VisionClient,
        evidence: EvidenceStorage,
        *,
        questions: Sequence[Question] = QUESTIONS,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._audits = audits
        self._stores = stores
        self._client = client
        self._evidence = evidence
        self._questions = tuple(questions)
        self._clock = clock

    def questions(self) -> List[Question]:
        return list(self._questions)

    def _check_auditor(self, user: UserProfile, store_id: str):
        if user.is_admin:
            raise AuthorizationError("No tiene permisos para esta acción")
        if store_id not in user.assigned_store_ids:
            raise ValidationError("La sucursal no está asignada a este usuario.")
        store = self._stores.get_by_id(store_id)
        if not store:
            raise ValidationError("La sucursal no existe")
        return store

    def _prepare(self, answers: Mapping[str, str], photos: Mapping[str, str]) -> tuple[Dict[str, str], Dict[str, str]]:
        answers, photos = prune(answers or {}, photos or {}, self._questions)
        validate_photos(photos)
        if not is_complete(answers, photos, self._questions):
            raise ValidationError("Complete todas las preguntas y fotos requeridas.")
        return answers, photos

    def _prompt_parts(self, store_name: str, answers: Mapping[str, str], photos: Mapping[str, str]) -> list:
        text = AUDIT_PROMPT_HEADER.format(store_name=store_name)
        for q in self._questions:
            text += f'- Pregunta: "{q.text}" (Categoría: {q.category})\n  Respuesta: "{answers.get(q.id) or "Sin respuesta"}"\n'
        text += AUDIT_PROMPT_FOOTER

        parts = [text_part(text)]
        for qid, data_url in photos.items():
            q = question_by_id(qid, self._questions)
            parts.append(image_part(data_url))
            parts.append(text_part(f'[Imagen adjunta para la pregunta: "{q.text if q else "Pregunta desconocida"}"]'))
        return parts

    def analyze(self, user: UserProfile, *, store_id: str, answers: Mapping[str, str], photos: Mapping[str, str]) -> AuditReport:
        store = self._check_auditor(user, store_id)
        answers, photos = self._prepare(answers, photos)

        try:
            payload = self._client.generate_json(self._prompt_parts(store.name, answers, photos), temperature=0.4)
            report = AuditReport.from_payload(payload)
        except Exception as e:
            logger.exception("audit analysis failed for store %s", store_id)
            raise AnalysisError(ANALYSIS_ERROR_MESSAGE) from e

        logger.info("audit analysed for %s by %s: score %s", store_id, user.username, report.score)
        return report

    def save(
        self,
        user: UserProfile,
        *,
        store_id: str,
        answers: Mapping[str, str],
        photos: Mapping[str, str],
        report: AuditReport,
    ) -> bool:
        """Upload photos, then insert the audit. Returns ``False`` if the insert fails."""
        self._check_auditor(user, store_id)
        answers, photos = self._prepare(answers, photos)

        photo_urls: Dict[str, str] = {}
        for qid, data_url in photos.items():
            url = self._evidence.upload(data_url, f"audit_{user.username}_q{qid}")
            if url:
                photo_urls[qid] = url
            else:
                logger.warning("audit photo for %s skipped (upload failed)", qid)

        record = AuditRecord(
            id=None,
            store_id=store_id,
            user_id=user.username,
            answers=answers,
            photos=photo_urls,
            ai_report=report,
            score=report.score,
            created_at=self._clock(),
        )
        try:
            audit_id = self._audits.create(record)
        except Exception:
            logger.exception("saving audit for %s failed", store_id)
            return False

        logger.info("audit %s saved for %s", audit_id, store_id)
        return True

    def list_audits(self, *, current_role: Role) -> Sequence[AuditRecord]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("No tiene permisos para esta acción")
        return self._audits.list_all()
