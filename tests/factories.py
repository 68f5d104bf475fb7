from collections import Counter

from exams.bank import BankOption, BankQuestion, BankSuboption
from exams.structure import PositionType
from questions.models import OPTION_LETTERS, AnswerOption, Question, Suboption

# option count, has suboptions, stored answer
SHAPES = {
    PositionType.SIMPLE.value: (4, False, "A"),
    PositionType.COMPLEX.value: (4, False, "B"),
    PositionType.MATCHING.value: (4, True, "A1B2"),
    PositionType.MULTIPLE.value: (6, False, "A,C"),
}


def bank_question(qid, topic=None, level=None, option_count=4, suboptions=False,
                  answer="A", context_id=None, text_ru="Вопрос", text_kz=None):
    options = tuple(
        BankOption(
            letter=OPTION_LETTERS[i],
            text_ru=f"Вариант {i}",
            suboptions=(BankSuboption("1", True), BankSuboption("2")) if suboptions else (),
        )
        for i in range(option_count)
    )
    return BankQuestion(
        id=qid, answer=answer, text_ru=text_ru, text_kz=text_kz,
        level=level, topic=topic, context_id=context_id, options=options,
    )


def create_question(topic=None, level=None, option_count=4, suboptions=False, answer="A",
                    context=None, text_ru="Вопрос", text_kz=None):
    question = Question.objects.create(
        text_ru=text_ru, text_kz=text_kz, answer=answer, level=level, topic=topic, context=context,
    )
    for index in range(option_count):
        option = AnswerOption.objects.create(
            question=question, letter=OPTION_LETTERS[index], order=index,
            text_ru=f"Вариант {index}", text_kz=f"Нұсқа {index}" if text_kz else None,
        )
        if suboptions:
            Suboption.objects.create(option=option, text="1", is_correct=True, order=0)
            Suboption.objects.create(option=option, text="2", order=1)
    return question


def structure_needs(structures):
    """(type, topic, level) -> most positions any one structure needs of it."""
    needs = Counter()
    for structure in structures:
        counts = Counter(
            (item.type, item.topic, item.level)
            for item in structure if item.type != PositionType.CONTEXT
        )
        for key, count in counts.items():
            needs[key] = max(needs[key], count)
    return needs
