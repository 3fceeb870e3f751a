import base64

import pytest

from store_attendance.audits.questions import (
    PHOTO_TOO_LARGE_MESSAGE,
    QUESTIONS,
    apply_answer,
    is_complete,
    missing_items,
    prune,
    visible_questions,
)
from store_attendance.core.exceptions import ValidationError

COMPLETE = {
    "dep_01": "Sí",
    "dep_02": "Sí",
    "dep_03": "Sí",
    "dep_03_mark": "Sí",
    "dep_03_obs": "Sí",
    "dep_04": "Sí",
    "dep_04_where": "Junto a la puerta",
    "dep_05": "Sí",
    "dep_06": "Buena",
}


def _ids(questions):
    return [q.id for q in questions]


def test_catalogue_ids_are_unique():
    assert len(set(_ids(QUESTIONS))) == len(QUESTIONS) == 13


def test_only_top_level_questions_start_visible():
    assert _ids(visible_questions({})) == ["dep_01", "dep_02", "dep_03", "dep_04", "dep_05", "dep_06"]


def test_follow_ups_appear_for_the_matching_answer():
    visible = _ids(visible_questions({"dep_03": "Sí", "dep_03_obs": "No", "dep_04": "No"}))
    assert "dep_03_mark" in visible
    assert "dep_03_obs_detail" in visible
    assert "dep_04_why_not" in visible
    assert "dep_04_where" not in visible


def test_changing_a_parent_prunes_descendants_and_their_photos():
    answers = {"dep_03": "Sí", "dep_03_obs": "No", "dep_03_obs_detail": "Cajas en los escalones"}
    photos = {"dep_03_obs": "data:image/png;base64,AAAA"}

    answers, photos = apply_answer(answers, photos, "dep_03", "No")
    assert answers == {"dep_03": "No"}
    assert photos == {}


def test_unknown_answers_are_dropped():
    answers, _ = prune({"dep_01": "Sí", "zzz": "?"}, {})
    assert answers == {"dep_01": "Sí"}


def test_unknown_question_cannot_be_answered():
    with pytest.raises(ValidationError):
        apply_answer({}, {}, "zzz", "Sí")


def test_complete_form():
    assert is_complete(COMPLETE, {})


def test_photo_required_by_the_answer():
    answers = {**COMPLETE, "dep_06": "Mala"}
    assert missing_items(answers, {}) == ["dep_06"]
    assert is_complete(answers, {"dep_06": "data:image/png;base64,AAAA"})


def test_unanswered_visible_question_is_missing():
    answers = {**COMPLETE, "dep_02": "No", "dep_02_why": ""}
    assert missing_items(answers, {"dep_02": "data:image/png;base64,AAAA"}) == ["dep_02_why"]


def test_photo_size_limit():
    from store_attendance.audits.questions import validate_photos

    big = "data:image/jpeg;base64," + base64.b64encode(b"\0" * (5 * 1024 * 1024 + 1)).decode("ascii")
    with pytest.raises(ValidationError) as exc:
        validate_photos({"dep_06": big})
    assert str(exc.value) == PHOTO_TOO_LARGE_MESSAGE

    validate_photos({"dep_06": "data:image/jpeg;base64,AAAA"})
