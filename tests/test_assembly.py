import random

from exams.assembly import StructuredExamAssembler, assemble_structured_exam
from exams.bank import InMemoryQuestionBank
from exams.selection import QuestionPoolSelector
from exams.structure import EXAM_STRUCTURE, EXAM_STRUCTURES

from .factories import bank_question


def test_full_bank_fills_all_forty_positions(full_bank):
    result = assemble_structured_exam(
        EXAM_STRUCTURE, "ru", QuestionPoolSelector(full_bank), rng=random.Random(1)
    )

    assert result.filled_count == 40
    assert result.issues == []
    assert [item.position for item in result.questions] == list(range(1, 41))
    context_ids = {item.question.context_id for item in result.questions if 26 <= item.position <= 30}
    assert context_ids == {100}
    assert result.context_used.id == 100


def test_every_variant_assembles_with_distinct_questions(full_bank):
    for structure in EXAM_STRUCTURES.values():
        result = assemble_structured_exam(
            structure, "ru", QuestionPoolSelector(full_bank), rng=random.Random(5), distinct=True
        )
        ids = [item.question.id for item in result.questions]
        assert result.issues == []
        assert len(ids) == len(set(ids)) == 40


def test_selected_questions_match_position_requirements(full_bank):
    result = assemble_structured_exam(EXAM_STRUCTURE, "ru", QuestionPoolSelector(full_bank))
    for item in result.questions:
        if item.required_type in ("simple", "complex", "matching", "multiple"):
            assert item.question.topic == item.required_topic


def test_seeded_rng_gives_reproducible_exam(full_bank):
    def run():
        result = assemble_structured_exam(
            EXAM_STRUCTURE, "ru", QuestionPoolSelector(full_bank), rng=random.Random(42)
        )
        return [item.question.id for item in result.questions]

    assert run() == run()


def test_missing_pools_are_reported_and_skipped(full_bank):
    bank = InMemoryQuestionBank(
        [q for q in full_bank.questions if not q.has_suboptions], full_bank.contexts
    )
    result = assemble_structured_exam(EXAM_STRUCTURE, "ru", QuestionPoolSelector(bank))

    assert result.filled_count == 35
    assert len(result.issues) == 5
    assert all(issue.startswith("No matching questions found for topic") for issue in result.issues)
    assert "at position 31" in result.issues[0]


def test_missing_context_group_reported_per_position(full_bank):
    bank = InMemoryQuestionBank([q for q in full_bank.questions if q.context_id is None])
    result = assemble_structured_exam(EXAM_STRUCTURE, "ru", QuestionPoolSelector(bank))

    assert result.filled_count == 35
    assert result.context_used is None
    assert result.issues == [
        f"No context with 5+ questions found for context position {p}" for p in range(26, 31)
    ]


def test_same_question_can_fill_several_positions():
    bank = InMemoryQuestionBank([bank_question(1, topic="CAL", level=1)])
    result = assemble_structured_exam(EXAM_STRUCTURE, "ru", QuestionPoolSelector(bank))

    assert [(item.position, item.question.id) for item in result.questions] == [(7, 1), (11, 1), (14, 1)]


def test_distinct_assembly_never_repeats_a_question():
    bank = InMemoryQuestionBank([bank_question(1, topic="CAL", level=1)])
    result = StructuredExamAssembler(QuestionPoolSelector(bank), distinct=True).assemble(EXAM_STRUCTURE, "ru")

    assert [(item.position, item.question.id) for item in result.questions] == [(7, 1)]
    assert "No simple questions found for topic: CAL at position 11" in result.issues


class BrokenSelector(QuestionPoolSelector):
    def find_matching(self, topic, language):
        raise RuntimeError("database is locked")


def test_pool_errors_become_issues(full_bank):
    result = assemble_structured_exam(EXAM_STRUCTURE, "ru", BrokenSelector(full_bank))

    assert result.filled_count == 35
    assert "Error selecting matching question for position 31: database is locked" in result.issues
