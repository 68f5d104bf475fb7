# exams/bank.py
"""
Plain records the exam engine works on, and the question-bank interface
it reads them from. The engine never touches the ORM directly; see
questions/repository.py for the Django-backed implementation.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class BankSuboption:
    text: str
    is_correct: bool = False
    order: int = 0


@dataclass(frozen=True)
class BankOption:
    letter: str
    text_ru: Optional[str] = None
    text_kz: Optional[str] = None
    suboptions: Tuple[BankSuboption, ...] = ()


@dataclass(frozen=True)
class BankContext:
    id: int
    title: str = ""
    text: str = ""


@dataclass(frozen=True)
class BankQuestion:
    id: int
    answer: str
    text_ru: Optional[str] = None
    text_kz: Optional[str] = None
    level: Optional[int] = None
    topic: Optional[str] = None
    context_id: Optional[int] = None
    options: Tuple[BankOption, ...] = field(default_factory=tuple)

    @property
    def option_count(self):
        return len(self.options)

    @property
    def has_suboptions(self):
        return any(opt.suboptions for opt in self.options)

    def text_for(self, language):
        return self.text_kz if language == "kz" else self.text_ru

    def has_text_in(self, language):
        text = self.text_for(language)
        return bool(text and text.strip())


class QuestionBank(ABC):
    """Read-only access to the question bank."""

    @abstractmethod
    def list_questions(self, language: str) -> List[BankQuestion]:
        """All questions with text in `language`, options and context linkage included."""

    @abstractmethod
    def list_contexts(self) -> List[BankContext]:
        ...

    def get_context(self, context_id) -> Optional[BankContext]:
        for context in self.list_contexts():
            if context.id == context_id:
                return context
        return None


class InMemoryQuestionBank(QuestionBank):
    """Question bank over plain lists. Used for fixtures and scripting."""

    def __init__(self, questions=None, contexts=None):
        self.questions = list(questions or [])
        self.contexts = list(contexts or [])

    def list_questions(self, language):
        return [q for q in self.questions if q.has_text_in(language)]

    def list_contexts(self):
        return list(self.contexts)
