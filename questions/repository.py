# mathquiz_platform/questions/repository.py
"""Question bank backed by the Django ORM."""
from django.db.models import Prefetch, Q

from exams.bank import BankContext, BankOption, BankQuestion, BankSuboption, QuestionBank
from .models import AnswerOption, Context, Question, Suboption


def language_filter(language):
    field = 'text_kz' if language == 'kz' else 'text_ru'
    return Q(**{f'{field}__isnull': False}) & ~Q(**{field: ''})


def to_bank_question(question):
    options = tuple(
        BankOption(
            letter=opt.letter,
            text_ru=opt.text_ru,
            text_kz=opt.text_kz,
            suboptions=tuple(
                BankSuboption(text=sub.text, is_correct=sub.is_correct, order=sub.order)
                for sub in opt.suboptions.all()
            ),
        )
        for opt in question.options.all()
    )
    return BankQuestion(
        id=question.id,
        answer=question.answer,
        text_ru=question.text_ru,
        text_kz=question.text_kz,
        level=question.level,
        topic=question.topic,
        context_id=question.context_id,
        options=options,
    )


class DjangoQuestionBank(QuestionBank):

    def get_queryset(self):
        return Question.objects.prefetch_related(
            Prefetch('options', queryset=AnswerOption.objects.order_by('order', 'id')),
            Prefetch('options__suboptions', queryset=Suboption.objects.order_by('order', 'id')),
        ).order_by('id')

    def list_questions(self, language):
        queryset = self.get_queryset().filter(language_filter(language))
        return [to_bank_question(q) for q in queryset]

    def list_contexts(self):
        return [BankContext(id=c.id, title=c.title, text=c.text) for c in Context.objects.order_by('id')]

    def get_context(self, context_id):
        context = Context.objects.filter(id=context_id).first()
        if context is None:
            return None
        return BankContext(id=context.id, title=context.title, text=context.text)
