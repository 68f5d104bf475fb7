# exams/services.py
"""
Exam lifecycle on top of the engine: start, submit, history and stats.

Views call these functions and translate ExamError subclasses into HTTP
responses. Everything that touches the database for one request runs
inside a single transaction.
"""
import logging
import random
from collections import OrderedDict
from typing import List, NamedTuple, Optional

from django.apps import apps
from django.conf import settings
from django.db import transaction
from django.utils import timezone

from questions.repository import DjangoQuestionBank
from .assembly import assemble_structured_exam
from .bank import BankContext
from .exceptions import (
    DeviceMismatch, ExamAlreadySubmitted, ExamNotFound,
    InvalidQuestionCount, NoQuestionsAvailable, NoQuestionsMatchFilters,
)
from .models import Exam, ExamQuestion
from .scoring import STRUCTURED_EXAM_SIZE, ScoringType, derive_question_type, max_points_for, score
from .selection import QuestionPoolSelector
from .structure import get_exam_structure, variant_name

logger = logging.getLogger(__name__)

HISTORY_DATE_FIELDS = ('started_at', 'completed_at')
TREND_LENGTH = 10


class StartedExam(NamedTuple):
    exam: Exam
    question_ids: List[int]
    is_structured: bool
    issues: List[str]
    context_used: Optional[BankContext]


def get_pool_cache():
    return apps.get_app_config('exams').pool_cache


def build_selector(bank=None):
    return QuestionPoolSelector(bank or DjangoQuestionBank(), cache=get_pool_cache())


def _random_questions(bank, language, count, filters, rng):
    questions = [q for q in bank.list_questions(language) if q.has_text_in(language)]
    if not questions:
        raise NoQuestionsAvailable(f"No questions available in language: {language}")

    topic = filters.get('topic')
    level = filters.get('level')
    if topic:
        questions = [q for q in questions if q.topic == topic]
    if level is not None:
        questions = [q for q in questions if q.level == level]
    if not questions:
        raise NoQuestionsMatchFilters()

    rng.shuffle(questions)
    return questions[:count]


def start_exam(device_id, question_count=STRUCTURED_EXAM_SIZE, filters=None, language=None, rng=None, bank=None):
    """
    Create an exam for `device_id`.

    A 40-question request is assembled from a randomly chosen structure
    variant. When fewer than EXAM_MIN_STRUCTURED_QUESTIONS positions can be
    filled the assembly is dropped and the exam is drawn at random, which is
    also the only path where topic and level filters apply.
    """
    filters = filters or {}
    language = language or settings.DEFAULT_LANGUAGE
    rng = rng or random.Random()
    bank = bank or DjangoQuestionBank()

    if not 1 <= question_count <= settings.EXAM_MAX_QUESTIONS:
        raise InvalidQuestionCount(f"question_count must be between 1 and {settings.EXAM_MAX_QUESTIONS}")

    rows = []
    issues = []
    context_used = None
    variant = ""
    is_structured = False

    if question_count == STRUCTURED_EXAM_SIZE:
        structure = get_exam_structure(rng)
        selector = build_selector(bank)
        result = assemble_structured_exam(structure, language, selector, rng=rng, distinct=True)
        if result.filled_count >= settings.EXAM_MIN_STRUCTURED_QUESTIONS:
            is_structured = True
            variant = variant_name(structure) or ""
            issues = result.issues
            context_used = result.context_used
            rows = [
                (item.position, item.question, derive_question_type(item.position))
                for item in result.questions
            ]
        else:
            logger.warning(
                "Structured exam filled %d/%d positions for %s, falling back to random selection",
                result.filled_count, STRUCTURED_EXAM_SIZE, language,
            )

    if not is_structured:
        questions = _random_questions(bank, language, question_count, filters, rng)
        rows = [(order, q, ScoringType.SIMPLE.value) for order, q in enumerate(questions, start=1)]

    with transaction.atomic():
        exam = Exam.objects.create(
            device_id=device_id,
            language=language,
            total_questions=len(rows),
            is_structured=is_structured,
            structure_variant=variant,
        )
        ExamQuestion.objects.bulk_create([
            ExamQuestion(
                exam=exam,
                question_id=question.id,
                order=order,
                question_type=question_type,
                correct_answer=question.answer,
                max_points=max_points_for(question.answer, question_type),
            )
            for order, question, question_type in rows
        ])

    logger.info(
        "Started exam %s for device %s: %d questions, structured=%s",
        exam.id, device_id, len(rows), is_structured,
    )
    return StartedExam(exam, [q.id for _, q, _ in rows], is_structured, issues, context_used)


def get_exam(exam_id):
    exam = Exam.objects.filter(id=exam_id).first()
    if exam is None:
        raise ExamNotFound()
    return exam


def submit_exam(exam_id, device_id, answers):
    """
    Score `answers` (a list of {"question_id", "answer"}) and close the exam.

    Answers to questions outside the exam are ignored. An exam can be
    submitted once.
    """
    now = timezone.now()
    with transaction.atomic():
        exam = Exam.objects.select_for_update().filter(id=exam_id).first()
        if exam is None:
            raise ExamNotFound()
        if exam.device_id != device_id:
            raise DeviceMismatch()
        if exam.status == Exam.Status.COMPLETED:
            raise ExamAlreadySubmitted()

        rows = {row.question_id: row for row in exam.exam_questions.all()}
        for answer in answers:
            row = rows.get(answer.get('question_id'))
            if row is None:
                logger.info("Exam %s: ignoring answer for question %s", exam.id, answer.get('question_id'))
                continue
            user_answer = answer.get('answer') or ""
            result = score(row.correct_answer, user_answer, row.question_type)
            row.user_answer = user_answer
            row.points_earned = result.points_earned
            row.answered_at = now
            row.save(update_fields=['user_answer', 'points_earned', 'answered_at'])

        exam.total_points = sum(row.points_earned for row in rows.values())
        exam.max_possible_points = sum(row.max_points for row in rows.values())
        exam.completed_at = now
        exam.duration_seconds = max(0, int((now - exam.started_at).total_seconds()))
        exam.status = Exam.Status.COMPLETED
        exam.save()

    logger.info("Exam %s submitted: %s/%s", exam.id, exam.total_points, exam.max_possible_points)
    return exam


def exam_history(device_id, limit=None, date_field='completed_at', start=None, end=None):
    if date_field not in HISTORY_DATE_FIELDS:
        raise ValueError(f"Invalid date field: {date_field}")

    queryset = Exam.objects.filter(device_id=device_id, status=Exam.Status.COMPLETED)
    if start is not None:
        queryset = queryset.filter(**{f'{date_field}__gte': start})
    if end is not None:
        queryset = queryset.filter(**{f'{date_field}__lte': end})
    queryset = queryset.order_by('-completed_at', '-id')
    if limit:
        queryset = queryset[:limit]
    return list(queryset)


def device_stats(device_id):
    exams = list(
        Exam.objects.filter(device_id=device_id, status=Exam.Status.COMPLETED).order_by('completed_at', 'id')
    )
    scores = [exam.score_percentage for exam in exams if exam.max_possible_points]

    by_topic = OrderedDict()
    rows = ExamQuestion.objects.filter(
        exam__device_id=device_id,
        exam__status=Exam.Status.COMPLETED,
        question__topic__isnull=False,
    ).values('exam_id', 'question__topic', 'points_earned', 'max_points')
    for row in rows:
        entry = by_topic.setdefault(row['question__topic'], {'exams': set(), 'earned': 0, 'max': 0, 'answered': 0})
        entry['exams'].add(row['exam_id'])
        entry['earned'] += row['points_earned']
        entry['max'] += row['max_points']
        entry['answered'] += 1

    topics = [
        {
            'topic': topic,
            'exams_count': len(entry['exams']),
            'avg_score': round(entry['earned'] * 100 / entry['max'], 2) if entry['max'] else 0,
            'questions_answered': entry['answered'],
        }
        for topic, entry in by_topic.items()
    ]
    topics.sort(key=lambda t: t['exams_count'], reverse=True)

    return {
        'total_exams': len(exams),
        'average_score': round(sum(scores) / len(scores), 2) if scores else 0,
        'best_score': max(scores) if scores else 0,
        'worst_score': min(scores) if scores else 0,
        'total_questions_answered': sum(exam.total_questions for exam in exams),
        'improvement_trend': scores[:TREND_LENGTH],
        'by_topic': topics,
    }


class ExamDetail(NamedTuple):
    exam: Exam
    rows: List[ExamQuestion]
    language: str


def exam_detail(exam_id, language=None):
    """Exam with its per-question results; question text in `language`."""
    exam = get_exam(exam_id)
    rows = list(exam.exam_questions.select_related('question').order_by('order'))
    return ExamDetail(exam, rows, language or exam.language)
