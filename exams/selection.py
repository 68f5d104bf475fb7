# exams/selection.py
"""
Question pools for each structural requirement of the exam.

A question's structural type is read from the shape of its options:

    simple / complex   exactly 4 options, no suboptions
    matching           at least one option carries suboptions
    multiple           exactly 6 options, no suboptions

Context-linked questions only ever appear through find_by_context /
find_context_group; every other pool excludes them.
"""
import logging
from collections import OrderedDict
from typing import NamedTuple, Optional, Tuple

from .bank import BankContext, BankQuestion
from .structure import CONTEXT_GROUP_SIZE

logger = logging.getLogger(__name__)

SIMPLE_OPTION_COUNT = 4
MULTIPLE_OPTION_COUNT = 6


class ContextGroup(NamedTuple):
    context: BankContext
    questions: Tuple[BankQuestion, ...]


def is_simple_shape(question):
    return question.option_count == SIMPLE_OPTION_COUNT and not question.has_suboptions


def is_matching_shape(question):
    return question.has_suboptions


def is_multiple_shape(question):
    return question.option_count == MULTIPLE_OPTION_COUNT and not question.has_suboptions


class QuestionPoolSelector:
    """
    Filters the question bank into pools.

    The bank is read once per language per selector; create a selector
    per request. An optional PoolCache is shared across requests.
    """

    def __init__(self, bank, cache=None):
        self.bank = bank
        self.cache = cache
        self._loaded = {}

    def _questions(self, language):
        if language not in self._loaded:
            self._loaded[language] = [
                q for q in self.bank.list_questions(language) if q.has_text_in(language)
            ]
        return self._loaded[language]

    def _pool(self, pool_type, topic, language, predicate):
        if self.cache is not None:
            cached = self.cache.get(pool_type, topic, language)
            if cached is not None:
                return cached

        pool = tuple(
            q for q in self._questions(language)
            if q.context_id is None
            and (topic is None or q.topic == topic)
            and predicate(q)
        )

        if self.cache is not None:
            self.cache.set(pool_type, topic, language, pool)
        return pool

    def find_simple(self, topic, level, language):
        """4-option questions of the given topic and level (used for simple and complex positions)."""
        return self._pool(
            f"simple:{level}", topic, language,
            lambda q: (level is None or q.level == level) and is_simple_shape(q),
        )

    def find_matching(self, topic, language):
        return self._pool("matching", topic, language, is_matching_shape)

    def find_multiple_choice(self, topic, language):
        return self._pool("multiple", topic, language, is_multiple_shape)

    def find_by_context(self, context_id, language):
        return tuple(q for q in self._questions(language) if q.context_id == context_id)

    def find_context_group(self, language) -> Optional[ContextGroup]:
        """First context with at least five questions in `language`, cut to exactly five."""
        groups = OrderedDict()
        for question in self._questions(language):
            if question.context_id is not None:
                groups.setdefault(question.context_id, []).append(question)

        for context_id, questions in groups.items():
            if len(questions) >= CONTEXT_GROUP_SIZE:
                context = self.bank.get_context(context_id) or BankContext(id=context_id)
                return ContextGroup(context, tuple(questions[:CONTEXT_GROUP_SIZE]))

        logger.info("No context with %d questions in language %s", CONTEXT_GROUP_SIZE, language)
        return None
