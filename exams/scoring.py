# exams/scoring.py
"""
Scoring rules for structured exams.

Every question is scored under one of three grammars, decided by its
position in the exam (see derive_question_type):

    simple    positions 1-30, or any question of a non-structured exam
    matching  positions 31-35, letter-digit pairs ("A1B2")
    multiple  positions 36-40, comma separated letters ("A,C")

score() is total: malformed answers score 0 against a valid max_points.
An empty stored correct answer gives max_points == 0, which callers must
read as "cannot be scored", not as a wrong answer.
"""
import logging
from typing import NamedTuple

from django.db import models

from .answer_format import parse_matching, parse_multiple, parse_simple

logger = logging.getLogger(__name__)

STRUCTURED_EXAM_SIZE = 40


class ScoringType(models.TextChoices):
    SIMPLE = "simple", "Single answer"
    MATCHING = "matching", "Matching pairs"
    MULTIPLE = "multiple", "Multiple answers"


class ScoreResult(NamedTuple):
    points_earned: int
    max_points: int


def derive_question_type(position, total_questions=STRUCTURED_EXAM_SIZE):
    """Scoring grammar for a 1-based position. Non-structured exams are always simple."""
    if total_questions != STRUCTURED_EXAM_SIZE:
        return ScoringType.SIMPLE.value
    if 31 <= position <= 35:
        return ScoringType.MATCHING.value
    if 36 <= position <= 40:
        return ScoringType.MULTIPLE.value
    return ScoringType.SIMPLE.value


def score_simple(correct_raw, user_raw):
    if not parse_multiple(correct_raw):
        return ScoreResult(0, 0)
    correct = parse_simple(correct_raw)
    user = parse_simple(user_raw)
    earned = 1 if correct and user and correct == user else 0
    return ScoreResult(earned, 1)


def _matching_points(total, hit):
    if total == 1:
        return 1 if hit == 1 else 0
    if total == 2:
        return hit
    if total > 3:
        logger.warning("Matching answer with %d pairs scored with the 3-pair table", total)
    if hit == total:
        return 2
    if hit == total - 1:
        return 1
    return 0


def score_matching(correct_raw, user_raw):
    correct = set(parse_matching(correct_raw))
    if not correct:
        return ScoreResult(0, 0)
    user = set(parse_matching(user_raw))
    if not user:
        return ScoreResult(0, 2)
    return ScoreResult(_matching_points(len(correct), len(user & correct)), 2)


def _multiple_points(total, hit, selected):
    # selected is the raw letter count; picking more letters than there are
    # correct ones caps the score for totals of 1 and 2
    if total == 1:
        if selected >= 3:
            return 0
        if selected == 2:
            return 1
        return 2 if hit == 1 else 0
    if total == 2:
        if hit == 2:
            return 2 if selected == 2 else 1
        if hit == 1:
            return 1
        return 1 if selected >= 3 else 0
    if total > 3:
        logger.warning("Multiple-choice answer with %d correct letters scored with the 3-letter table", total)
    if hit == total:
        return 2
    if hit == total - 1:
        return 1
    return 0


def score_multiple(correct_raw, user_raw):
    correct = set(parse_multiple(correct_raw))
    if not correct:
        return ScoreResult(0, 0)
    user_tokens = parse_multiple(user_raw)
    if not user_tokens:
        return ScoreResult(0, 2)
    hit = len(set(user_tokens) & correct)
    return ScoreResult(_multiple_points(len(correct), hit, len(user_tokens)), 2)


_SCORERS = {
    ScoringType.SIMPLE.value: score_simple,
    ScoringType.MATCHING.value: score_matching,
    ScoringType.MULTIPLE.value: score_multiple,
}


def score(correct_raw, user_raw, question_type=ScoringType.SIMPLE):
    scorer = _SCORERS.get(getattr(question_type, "value", question_type), score_simple)
    return scorer(correct_raw, user_raw)


def max_points_for(correct_raw, question_type=ScoringType.SIMPLE):
    """max_points snapshotted onto an exam row at creation time."""
    return score(correct_raw, "", question_type).max_points
