# exams/structure.py
"""
Fixed layout of the 40-question structured exam.

    1-15   simple    level 1, 4 options
    16-25  complex   level 2, 4 options
    26-30  context   five questions sharing one reading passage
    31-35  matching  options carry suboptions
    36-40  multiple  6 options, 1-3 correct letters

Three variants share the layout and only reorder topics.
"""
from collections import Counter
from typing import NamedTuple, Optional

from django.db import models


class PositionType(models.TextChoices):
    SIMPLE = "simple", "Simple"
    COMPLEX = "complex", "Complex"
    CONTEXT = "context", "Context"
    MATCHING = "matching", "Matching"
    MULTIPLE = "multiple", "Multiple choice"


class StructurePosition(NamedTuple):
    position: int
    topic: Optional[str]
    level: Optional[int]
    type: str


CONTEXT_FIRST_POSITION = 26
CONTEXT_GROUP_SIZE = 5


def _build(simple, complex_, matching, multiple):
    rows = []
    for topic in simple:
        rows.append(StructurePosition(len(rows) + 1, topic, 1, PositionType.SIMPLE.value))
    for topic in complex_:
        rows.append(StructurePosition(len(rows) + 1, topic, 2, PositionType.COMPLEX.value))
    for _ in range(CONTEXT_GROUP_SIZE):
        rows.append(StructurePosition(len(rows) + 1, None, None, PositionType.CONTEXT.value))
    for topic in matching:
        rows.append(StructurePosition(len(rows) + 1, topic, None, PositionType.MATCHING.value))
    for topic in multiple:
        rows.append(StructurePosition(len(rows) + 1, topic, None, PositionType.MULTIPLE.value))
    return tuple(rows)


EXAM_STRUCTURE_A = _build(
    simple=["RAD", "POW", "TRG", "ALG", "EQS", "SYS", "CAL", "GEO",
            "INS", "TRE", "CAL", "INE", "GEO", "CAL", "SPA"],
    complex_=["EXL", "SYM", "CAL", "GEO", "PRG", "VEC", "ALG", "EXL", "INE", "CAL"],
    matching=["CAL", "GEO", "ALG", "EQS", "PRG"],
    multiple=["ALG", "TRG", "PRG", "SYM", "SPA"],
)

EXAM_STRUCTURE_B = _build(
    simple=["GEO", "ALG", "CAL", "TRG", "SYS", "RAD", "EQS", "POW",
            "TRE", "INS", "SPA", "GEO", "CAL", "INE", "ALG"],
    complex_=["VEC", "PRG", "GEO", "CAL", "ALG", "EXL", "SYM", "INE", "CAL", "PRG"],
    matching=["PRG", "ALG", "CAL", "GEO", "EQS"],
    multiple=["SPA", "SYM", "ALG", "PRG", "TRG"],
)

EXAM_STRUCTURE_C = _build(
    simple=["CAL", "SPA", "ALG", "GEO", "TRG", "INE", "POW", "RAD",
            "EQS", "CAL", "SYS", "TRE", "INS", "GEO", "RAD"],
    complex_=["CAL", "ALG", "PRG", "SYM", "GEO", "INE", "VEC", "CAL", "EXL", "ALG"],
    matching=["EQS", "CAL", "PRG", "ALG", "GEO"],
    multiple=["TRG", "PRG", "SYM", "ALG", "SPA"],
)

EXAM_STRUCTURES = {
    "A": EXAM_STRUCTURE_A,
    "B": EXAM_STRUCTURE_B,
    "C": EXAM_STRUCTURE_C,
}

# Canonical layout, used by readiness checks
EXAM_STRUCTURE = EXAM_STRUCTURE_A

QUESTION_TYPE_CRITERIA = {
    PositionType.SIMPLE.value: {
        "description": "Simple questions with 4 options",
        "advice": "Add more level 1 questions with 4 options for the mentioned topics",
    },
    PositionType.COMPLEX.value: {
        "description": "Complex questions with 4 options",
        "advice": "Add more level 2 questions with 4 options for the mentioned topics",
    },
    PositionType.CONTEXT.value: {
        "description": "Context-based questions (5 questions per context)",
        "advice": "Create contexts with at least 5 related questions each",
    },
    PositionType.MATCHING.value: {
        "description": "Matching questions with suboptions",
        "advice": "Add more questions with suboptions for the mentioned topics",
    },
    PositionType.MULTIPLE.value: {
        "description": "Multiple choice questions with 6 options",
        "advice": "Add more questions with 6 options for the mentioned topics",
    },
}


def get_exam_structure(rng=None):
    """Canonical structure, or a uniformly chosen variant when an rng is given."""
    if rng is None:
        return EXAM_STRUCTURE
    variant = rng.choice(sorted(EXAM_STRUCTURES))
    return EXAM_STRUCTURES[variant]


def variant_name(structure):
    for name, candidate in EXAM_STRUCTURES.items():
        if candidate == structure:
            return name
    return None


def count_by_type(structure=EXAM_STRUCTURE):
    return dict(Counter(item.type for item in structure))
