from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional

from ..common.datetime_utils import to_iso


@dataclass(frozen=True)
class Dependency:
    question_id: str
    value: str


@dataclass(frozen=True)
class Question:
    id: str
    category: str
    text: str
    type: str  # "select" | "text"
    options: tuple[str, ...] = field(default_factory=tuple)
    depends_on: Optional[Dependency] = None
    photo_required_if: tuple[str, ...] = field(default_factory=tuple)

    def requires_photo(self, answer: Optional[str]) -> bool:
        return bool(answer) and answer in self.photo_required_if

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "category": self.category,
            "text": self.text,
            "type": self.type,
            "options": list(self.options),
            "depends_on": (
                {"question_id": self.depends_on.question_id, "value": self.depends_on.value}
                if self.depends_on
                else None
            ),
            "photo_required_if": list(self.photo_required_if),
        }


@dataclass(frozen=True)
class AuditReport:
    score: int
    summary: str
    critical_issues: tuple[str, ...] = field(default_factory=tuple)
    recommendations: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_payload(cls, payload: dict) -> "AuditReport":
        """Build from the model answer or a stored ``ai_report`` (camelCase keys)."""
        if "score" not in payload or "summary" not in payload:
            raise ValueError("Reporte incompleto")
        score = int(round(float(payload["score"])))

        def _texts(key: str) -> tuple[str, ...]:
            items = payload.get(key) or []
            if not isinstance(items, list):
                raise ValueError(f"{key} debe ser una lista")
            return tuple(str(i) for i in items)

        return cls(
            score=max(0, min(100, score)),
            summary=str(payload["summary"]),
            critical_issues=_texts("criticalIssues"),
            recommendations=_texts("recommendations"),
        )

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "summary": self.summary,
            "criticalIssues": list(self.critical_issues),
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class AuditRecord:
    """Domain entity: a saved store audit. Photos are stored as URLs."""

    id: Optional[int]
    store_id: str
    user_id: str
    answers: Dict[str, str]
    photos: Dict[str, str]
    ai_report: AuditReport
    score: int
    created_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "store_id": self.store_id,
            "user_id": self.user_id,
            "answers": dict(self.answers),
            "photos": dict(self.photos),
            "ai_report": self.ai_report.to_dict(),
            "score": self.score,
            "created_at": to_iso(self.created_at),
        }
