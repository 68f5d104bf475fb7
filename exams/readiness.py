# exams/readiness.py
"""
Pre-flight audit of the question bank against the exam structure.

Runs the same pool queries as the assembler but only counts. Read-only:
running it twice against an unchanged bank gives the same report.
"""
import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, List

from django.utils import timezone

from .structure import (
    CONTEXT_GROUP_SIZE, EXAM_STRUCTURE, QUESTION_TYPE_CRITERIA, PositionType, count_by_type,
)

logger = logging.getLogger(__name__)

TYPE_LABELS = {
    PositionType.SIMPLE.value: "simple",
    PositionType.COMPLEX.value: "complex",
    PositionType.MATCHING.value: "matching",
    PositionType.MULTIPLE.value: "multiple choice",
}


@dataclass
class ReadinessReport:
    language: str
    is_ready: bool = True
    issues: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    topic_coverage: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    type_coverage: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    recommended_actions: List[str] = field(default_factory=list)
    timestamp: Any = None

    @property
    def readiness_score(self):
        if self.is_ready:
            return 100
        return max(0, 100 - 10 * len(self.issues))

    def as_dict(self):
        return {
            'timestamp': self.timestamp,
            'language': self.language,
            'is_ready': self.is_ready,
            'issues': list(self.issues),
            'warnings': list(self.warnings),
            'topic_coverage': self.topic_coverage,
            'type_coverage': self.type_coverage,
            'recommended_actions': list(self.recommended_actions),
            'summary': {
                'total_issues': len(self.issues),
                'total_warnings': len(self.warnings),
                'readiness_score': self.readiness_score,
            },
        }


def _group_requirements(structure):
    """(type, topic, level) -> number of positions needing it, in structure order."""
    needed = OrderedDict()
    for item in structure:
        if item.type == PositionType.CONTEXT:
            continue
        key = (item.type, item.topic, item.level)
        needed[key] = needed.get(key, 0) + 1
    return needed


def _pool_for(selector, position_type, topic, level, language):
    if position_type in (PositionType.SIMPLE, PositionType.COMPLEX):
        return selector.find_simple(topic, level, language)
    if position_type == PositionType.MATCHING:
        return selector.find_matching(topic, language)
    if position_type == PositionType.MULTIPLE:
        return selector.find_multiple_choice(topic, language)
    raise ValueError(f"Unknown question type: {position_type}")


def recommended_actions(report):
    actions = []
    if not report.is_ready:
        actions.append("Database is not ready for structured 40-question exams")
        for issue in report.issues:
            for position_type, criteria in QUESTION_TYPE_CRITERIA.items():
                if f"{TYPE_LABELS.get(position_type, position_type)} questions" in issue \
                        or (position_type == PositionType.CONTEXT and "context" in issue):
                    actions.append(f"• {criteria['advice']}")
                    break
    else:
        actions.append("Database is ready for structured 40-question exams")
        if report.warnings:
            actions.append("Recommendations for better reliability:")
            actions.extend(f"• {warning}" for warning in report.warnings)
    return actions


def check_readiness(selector, language, structure=None) -> ReadinessReport:
    structure = structure or EXAM_STRUCTURE
    report = ReadinessReport(language=language, timestamp=timezone.now())

    type_counts = count_by_type(structure)

    try:
        for (position_type, topic, level), needed in _group_requirements(structure).items():
            available = len(_pool_for(selector, position_type, topic, level, language))
            totals = report.type_coverage.setdefault(position_type, {
                'needed': type_counts[position_type], 'available': 0, 'sufficient': True,
            })
            totals['available'] += available
            totals['sufficient'] = totals['sufficient'] and available >= needed
            report.topic_coverage[f"{topic}_{position_type}"] = {
                'needed': needed,
                'available': available,
                'sufficient': available >= needed,
            }
            label = TYPE_LABELS.get(position_type, position_type)
            if available < needed:
                report.is_ready = False
                report.issues.append(
                    f"Insufficient {label} questions for topic {topic}: need {needed}, have {available}"
                )
            elif available == needed:
                report.warnings.append(
                    f"Exactly {needed} {label} questions for topic {topic} - no backup questions"
                )

        if any(item.type == PositionType.CONTEXT for item in structure):
            group = selector.find_context_group(language)
            report.type_coverage['context'] = {
                'needed': CONTEXT_GROUP_SIZE,
                'available': len(group.questions) if group else 0,
                'sufficient': group is not None,
                'context_id': group.context.id if group else None,
            }
            if group is None:
                report.is_ready = False
                report.issues.append("No context with 5+ questions found for context section")

    except Exception as e:
        logger.exception("Readiness validation failed")
        report.is_ready = False
        report.issues.append(f"Validation error: {e}")

    report.recommended_actions = recommended_actions(report)
    return report
