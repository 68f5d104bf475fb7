# exams/assembly.py
"""Draws one question per position of a structured exam."""
import logging
import random
from typing import List, NamedTuple, Optional

from .bank import BankContext, BankQuestion
from .structure import CONTEXT_FIRST_POSITION, PositionType

logger = logging.getLogger(__name__)


class AssembledQuestion(NamedTuple):
    position: int
    question: BankQuestion
    required_type: str
    required_topic: Optional[str]


class AssemblyResult(NamedTuple):
    questions: List[AssembledQuestion]
    issues: List[str]
    context_used: Optional[BankContext]

    @property
    def filled_count(self):
        return len(self.questions)


class StructuredExamAssembler:
    """
    Walks the structure in order and picks a random question from the pool
    matching each position.

    A position whose pool is empty is reported in `issues` and left out;
    there is no backtracking. The same question may be drawn for two
    positions unless `distinct=True`.
    """

    def __init__(self, selector, rng=None, distinct=False):
        self.selector = selector
        self.rng = rng or random.Random()
        self.distinct = distinct

    def _pick(self, pool, taken_ids):
        if self.distinct:
            pool = [q for q in pool if q.id not in taken_ids]
        if not pool:
            return None
        return self.rng.choice(list(pool))

    def assemble(self, structure, language) -> AssemblyResult:
        selected = []
        issues = []
        taken_ids = set()
        context_group = None
        context_resolved = False

        for item in structure:
            question = None
            try:
                if item.type in (PositionType.SIMPLE, PositionType.COMPLEX):
                    pool = self.selector.find_simple(item.topic, item.level, language)
                    question = self._pick(pool, taken_ids)
                    if question is None:
                        issues.append(
                            f"No {item.type} questions found for topic: {item.topic} "
                            f"at position {item.position}"
                        )

                elif item.type == PositionType.CONTEXT:
                    if not context_resolved:
                        context_group = self.selector.find_context_group(language)
                        context_resolved = True
                    index = item.position - CONTEXT_FIRST_POSITION
                    if context_group is None:
                        issues.append(
                            f"No context with 5+ questions found for context position {item.position}"
                        )
                    elif 0 <= index < len(context_group.questions):
                        question = context_group.questions[index]
                    else:
                        issues.append(f"Not enough context questions for position {item.position}")

                elif item.type == PositionType.MATCHING:
                    question = self._pick(self.selector.find_matching(item.topic, language), taken_ids)
                    if question is None:
                        issues.append(
                            f"No matching questions found for topic: {item.topic} "
                            f"at position {item.position}"
                        )

                elif item.type == PositionType.MULTIPLE:
                    question = self._pick(self.selector.find_multiple_choice(item.topic, language), taken_ids)
                    if question is None:
                        issues.append(
                            f"No multiple choice questions found for topic: {item.topic} "
                            f"at position {item.position}"
                        )

                else:
                    issues.append(f"Unknown question type: {item.type} at position {item.position}")

            except Exception as e:
                logger.exception("Pool query failed at position %s", item.position)
                issues.append(f"Error selecting {item.type} question for position {item.position}: {e}")
                question = None

            if question is not None:
                selected.append(AssembledQuestion(item.position, question, item.type, item.topic))
                taken_ids.add(question.id)

        if issues:
            logger.warning("Structured exam assembled with %d issue(s): %s", len(issues), issues)

        return AssemblyResult(
            questions=selected,
            issues=issues,
            context_used=context_group.context if context_group else None,
        )


def assemble_structured_exam(structure, language, selector, rng=None, distinct=False):
    return StructuredExamAssembler(selector, rng=rng, distinct=distinct).assemble(structure, language)
