"""Warehouse ("Depósito") audit questionnaire and its visibility rules."""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from ..common.images import decoded_size, parse_data_url
from ..core.constants import MAX_AUDIT_PHOTO_BYTES
from ..core.exceptions import ValidationError
from .model import Dependency, Question

_YES_NO = ("Sí", "No")
_CATEGORY = "Depósito"

QUESTIONS: tuple[Question, ...] = (
    Question(
        "dep_01", _CATEGORY, "¿Están delimitados todos los pasillos del depósito con cinta amarilla?",
        "select", _YES_NO, photo_required_if=("No",),
    ),
    Question(
        "dep_02", _CATEGORY, "¿Los pasillos permiten la fácil circulación?",
        "select", _YES_NO, photo_required_if=("No",),
    ),
    Question(
        "dep_02_why", _CATEGORY, "¿Por qué los pasillos no permiten la fácil circulación?",
        "text", depends_on=Dependency("dep_02", "No"),
    ),
    Question(
        "dep_03", _CATEGORY, "El depósito, ¿cuenta con escaleras?",
        "select", _YES_NO, photo_required_if=("No",),
    ),
    Question(
        "dep_03_mark", _CATEGORY, "¿Están señalizados con cinta amarilla el primer y último escalón?",
        "select", _YES_NO, depends_on=Dependency("dep_03", "Sí"), photo_required_if=("No",),
    ),
    Question(
        "dep_03_obs", _CATEGORY,
        "¿Las escaleras se encuentran libres de productos y/o cosas que generan obstáculos?",
        "select", _YES_NO, depends_on=Dependency("dep_03", "Sí"), photo_required_if=("No",),
    ),
    Question(
        "dep_03_obs_detail", _CATEGORY, "¿Qué obstáculos hay en las escaleras?",
        "text", depends_on=Dependency("dep_03_obs", "No"),
    ),
    Question(
        "dep_04", _CATEGORY, "¿Está el cartel de salida del depósito colocado?",
        "select", _YES_NO, photo_required_if=("No",),
    ),
    Question(
        "dep_04_where", _CATEGORY, "¿Dónde está colocado el cartel?",
        "text", depends_on=Dependency("dep_04", "Sí"),
    ),
    Question(
        "dep_04_why_not", _CATEGORY, "¿Por qué no está colocado el cartel de salida del depósito?",
        "text", depends_on=Dependency("dep_04", "No"),
    ),
    Question(
        "dep_05", _CATEGORY, "¿El espacio físico del depósito es acorde a la cantidad de productos?",
        "select", _YES_NO, photo_required_if=("No",),
    ),
    Question(
        "dep_05_why", _CATEGORY, "¿Por qué no es acorde el espacio físico del depósito?",
        "text", depends_on=Dependency("dep_05", "No"),
    ),
    Question(
        "dep_06", _CATEGORY, "Estado de limpieza del depósito",
        "select", ("Buena", "Regular", "Mala"), photo_required_if=("Regular", "Mala"),
    ),
)

PHOTO_TOO_LARGE_MESSAGE = "La imagen es demasiado grande. Por favor suba una imagen menor a 5MB."


def question_by_id(question_id: str, questions: Sequence[Question] = QUESTIONS) -> Optional[Question]:
    return next((q for q in questions if q.id == question_id), None)


def visible_questions(answers: Mapping[str, str], questions: Sequence[Question] = QUESTIONS) -> List[Question]:
    """A question is visible when its parent is visible and answered with the expected value."""
    by_id = {q.id: q for q in questions}
    memo: Dict[str, bool] = {}

    def visible(q: Question) -> bool:
        if q.id not in memo:
            dep = q.depends_on
            if dep is None:
                memo[q.id] = True
            else:
                parent = by_id.get(dep.question_id)
                memo[q.id] = (
                    parent is not None and visible(parent) and answers.get(dep.question_id) == dep.value
                )
        return memo[q.id]

    return [q for q in questions if visible(q)]


def prune(
    answers: Mapping[str, str],
    photos: Mapping[str, str],
    questions: Sequence[Question] = QUESTIONS,
) -> tuple[Dict[str, str], Dict[str, str]]:
    """Drop answers and photos of questions that are not visible (or unknown)."""
    visible_ids = [q.id for q in visible_questions(answers, questions)]
    kept_answers = {qid: answers[qid] for qid in visible_ids if answers.get(qid)}
    kept_photos = {qid: photos[qid] for qid in visible_ids if photos.get(qid)}
    return kept_answers, kept_photos


def apply_answer(
    answers: Mapping[str, str],
    photos: Mapping[str, str],
    question_id: str,
    value: str,
    questions: Sequence[Question] = QUESTIONS,
) -> tuple[Dict[str, str], Dict[str, str]]:
    if question_by_id(question_id, questions) is None:
        raise ValidationError(f"Pregunta desconocida: {question_id}")
    updated = dict(answers)
    updated[question_id] = value
    return prune(updated, photos, questions)


def missing_items(
    answers: Mapping[str, str],
    photos: Mapping[str, str],
    questions: Sequence[Question] = QUESTIONS,
) -> List[str]:
    """Ids of visible questions still lacking an answer or a required photo."""
    missing = []
    for q in visible_questions(answers, questions):
        answer = answers.get(q.id)
        if not answer or (q.requires_photo(answer) and not photos.get(q.id)):
            missing.append(q.id)
    return missing


def is_complete(answers: Mapping[str, str], photos: Mapping[str, str], questions: Sequence[Question] = QUESTIONS) -> bool:
    return not missing_items(answers, photos, questions)


def validate_photos(photos: Mapping[str, str]) -> None:
    for qid, data_url in photos.items():
        if parse_data_url(data_url) is None:
            raise ValidationError(f"Foto inválida para la pregunta {qid}.")
        if decoded_size(data_url) > MAX_AUDIT_PHOTO_BYTES:
            raise ValidationError(PHOTO_TOO_LARGE_MESSAGE)


def question_texts(questions: Iterable[Question] = QUESTIONS) -> Dict[str, str]:
    return {q.id: q.text for q in questions}
