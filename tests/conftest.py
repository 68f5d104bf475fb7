import itertools

import pytest
from django.apps import apps

from exams.bank import BankContext, InMemoryQuestionBank
from exams.structure import EXAM_STRUCTURES
from questions.models import Context

from .factories import SHAPES, bank_question, create_question, structure_needs


@pytest.fixture
def full_bank():
    """In-memory bank that fills every structure variant, plus one 5-question context."""
    ids = itertools.count(1)
    questions = []
    for (position_type, topic, level), count in structure_needs(EXAM_STRUCTURES.values()).items():
        option_count, suboptions, answer = SHAPES[position_type]
        for _ in range(count):
            questions.append(bank_question(
                next(ids), topic=topic, level=level, option_count=option_count,
                suboptions=suboptions, answer=answer,
            ))
    for _ in range(5):
        questions.append(bank_question(next(ids), topic="CTX", level=1, context_id=100))
    return InMemoryQuestionBank(questions, [BankContext(id=100, title="Поезд", text="Текст")])


@pytest.fixture
def seeded_bank(db):
    """Database bank that fills every structure variant without repeating a question."""
    for (position_type, topic, level), count in structure_needs(EXAM_STRUCTURES.values()).items():
        option_count, suboptions, answer = SHAPES[position_type]
        for _ in range(count):
            create_question(topic=topic, level=level, option_count=option_count,
                            suboptions=suboptions, answer=answer)
    context = Context.objects.create(title="Поезд", text="Поезд идёт со скоростью...")
    for _ in range(5):
        create_question(topic="CTX", level=1, context=context, answer="C")
    return context


@pytest.fixture(autouse=True)
def clear_pool_cache():
    # The pool cache lives on the app config and outlives test transactions
    apps.get_app_config('exams').pool_cache.clear()
    yield
    apps.get_app_config('exams').pool_cache.clear()
