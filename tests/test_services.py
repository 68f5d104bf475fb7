import random
from datetime import timedelta

import pytest
from django.apps import apps
from django.utils import timezone

from exams import services
from exams.exceptions import (
    DeviceMismatch, ExamAlreadySubmitted, ExamNotFound,
    InvalidQuestionCount, NoQuestionsAvailable, NoQuestionsMatchFilters,
)
from exams.models import Exam

from .factories import create_question

pytestmark = pytest.mark.django_db


def perfect_answers(exam):
    return [{"question_id": row.question_id, "answer": row.correct_answer} for row in exam.exam_questions.all()]


def test_start_structured_exam(seeded_bank):
    started = services.start_exam("device-1", 40, language="ru", rng=random.Random(1))
    exam = started.exam

    assert started.is_structured
    assert started.issues == []
    assert started.context_used.id == seeded_bank.id
    assert exam.total_questions == 40
    assert exam.structure_variant in ("A", "B", "C")

    rows = list(exam.exam_questions.order_by('order'))
    assert [row.order for row in rows] == list(range(1, 41))
    assert len({row.question_id for row in rows}) == 40
    assert {row.max_points for row in rows[:30]} == {1}
    assert {row.question_type for row in rows[30:35]} == {"matching"}
    assert {row.question_type for row in rows[35:]} == {"multiple"}
    assert {row.max_points for row in rows[30:]} == {2}
    assert {row.question.context_id for row in rows[25:30]} == {seeded_bank.id}


def test_start_falls_back_to_random_when_structure_cannot_be_filled():
    for _ in range(12):
        create_question(topic="CAL", level=1)

    started = services.start_exam("device-1", 40, rng=random.Random(1))

    assert not started.is_structured
    assert started.exam.total_questions == 12
    assert set(started.exam.exam_questions.values_list('question_type', flat=True)) == {"simple"}


def test_start_random_exam_with_filters():
    for _ in range(3):
        create_question(topic="CAL", level=1)
    geo = [create_question(topic="GEO", level=2) for _ in range(3)]

    started = services.start_exam("device-1", 10, filters={"topic": "GEO"}, rng=random.Random(3))

    assert sorted(started.question_ids) == sorted(q.id for q in geo)
    assert not started.exam.is_structured


def test_start_errors():
    with pytest.raises(NoQuestionsAvailable):
        services.start_exam("device-1", 10)

    create_question(topic="CAL", level=1)
    with pytest.raises(NoQuestionsMatchFilters):
        services.start_exam("device-1", 10, filters={"topic": "GEO"})
    with pytest.raises(NoQuestionsMatchFilters):
        services.start_exam("device-1", 10, filters={"level": 3})
    with pytest.raises(InvalidQuestionCount):
        services.start_exam("device-1", 0)
    with pytest.raises(InvalidQuestionCount):
        services.start_exam("device-1", 201)


def test_start_uses_requested_language():
    create_question(topic="CAL", text_ru="Вопрос")
    kz = create_question(topic="CAL", text_ru=None, text_kz="Сұрақ")

    started = services.start_exam("device-1", 5, language="kz")

    assert started.question_ids == [kz.id]
    assert started.exam.language == "kz"


def test_submit_scores_structured_exam(seeded_bank):
    exam = services.start_exam("device-1", 40, rng=random.Random(2)).exam

    submitted = services.submit_exam(exam.id, "device-1", perfect_answers(exam))

    assert submitted.status == Exam.Status.COMPLETED
    assert submitted.total_points == 50
    assert submitted.max_possible_points == 50
    assert submitted.score_percentage == 100
    assert submitted.completed_at is not None
    assert submitted.duration_seconds >= 0


def test_submit_partial_credit_and_foreign_answers(seeded_bank):
    exam = services.start_exam("device-1", 40, rng=random.Random(2)).exam
    matching = exam.exam_questions.get(order=31)
    multiple = exam.exam_questions.get(order=36)
    foreign = create_question(topic="CAL", level=1)

    submitted = services.submit_exam(exam.id, "device-1", [
        {"question_id": matching.question_id, "answer": "a1 b3"},
        {"question_id": multiple.question_id, "answer": "A,C,E"},
        {"question_id": foreign.id, "answer": "A"},
    ])

    matching.refresh_from_db()
    multiple.refresh_from_db()
    assert matching.points_earned == 1
    assert matching.user_answer == "a1 b3"
    assert multiple.points_earned == 1
    assert submitted.total_points == 2
    assert submitted.max_possible_points == 50
    assert not exam.exam_questions.filter(question=foreign).exists()


def test_submit_is_allowed_once(seeded_bank):
    exam = services.start_exam("device-1", 40, rng=random.Random(2)).exam
    services.submit_exam(exam.id, "device-1", [])

    with pytest.raises(ExamAlreadySubmitted):
        services.submit_exam(exam.id, "device-1", perfect_answers(exam))


def test_submit_checks_exam_and_device():
    create_question(topic="CAL", level=1)
    exam = services.start_exam("device-1", 1).exam

    with pytest.raises(ExamNotFound):
        services.submit_exam(exam.id + 100, "device-1", [])
    with pytest.raises(DeviceMismatch):
        services.submit_exam(exam.id, "device-2", [])


def test_history_and_stats(seeded_bank):
    first = services.start_exam("device-1", 40, rng=random.Random(1)).exam
    services.submit_exam(first.id, "device-1", perfect_answers(first))
    second = services.start_exam("device-1", 40, rng=random.Random(2)).exam
    services.submit_exam(second.id, "device-1", [])
    services.start_exam("device-1", 40, rng=random.Random(3))  # still in progress
    services.start_exam("device-2", 40, rng=random.Random(4))

    history = services.exam_history("device-1")
    assert [exam.id for exam in history] == [second.id, first.id]
    assert services.exam_history("device-1", limit=1)[0].id == second.id
    assert services.exam_history("device-1", start=timezone.now() + timedelta(days=1)) == []

    stats = services.device_stats("device-1")
    assert stats["total_exams"] == 2
    assert stats["average_score"] == 50
    assert stats["best_score"] == 100
    assert stats["worst_score"] == 0
    assert stats["total_questions_answered"] == 80
    assert stats["improvement_trend"] == [100, 0]
    ctx = next(entry for entry in stats["by_topic"] if entry["topic"] == "CTX")
    assert ctx["exams_count"] == 2
    assert ctx["questions_answered"] == 10
    assert ctx["avg_score"] == 50


def test_history_rejects_unknown_date_field():
    with pytest.raises(ValueError):
        services.exam_history("device-1", date_field="created_at")


def test_stats_for_unknown_device():
    stats = services.device_stats("nobody")
    assert stats["total_exams"] == 0
    assert stats["improvement_trend"] == []
    assert stats["by_topic"] == []


def test_exam_detail_uses_requested_language():
    create_question(topic="CAL", text_ru="Вопрос", text_kz="Сұрақ")
    exam = services.start_exam("device-1", 1).exam

    detail = services.exam_detail(exam.id, "kz")

    assert detail.language == "kz"
    assert len(detail.rows) == 1
    with pytest.raises(ExamNotFound):
        services.exam_detail(exam.id + 1)


def test_bank_changes_clear_pool_cache(seeded_bank):
    cache = apps.get_app_config('exams').pool_cache
    services.start_exam("device-1", 40, rng=random.Random(1))
    assert cache.get_stats()["total"] > 0

    create_question(topic="CAL", level=1)

    assert cache.get_stats()["total"] == 0
