# mathquiz_platform/exams/models.py
from django.db import models

from questions.models import Question
from .scoring import ScoringType


class Exam(models.Model):
    """One attempt by an anonymous device."""

    class Status(models.TextChoices):
        IN_PROGRESS = "in_progress", "In progress"
        COMPLETED = "completed", "Completed"
        ABANDONED = "abandoned", "Abandoned"

    device_id = models.CharField(max_length=255, db_index=True)
    language = models.CharField(max_length=5, default="ru")

    started_at = models.DateTimeField(auto_now_add=True)
    completed_at = models.DateTimeField(null=True, blank=True)  # Set on submit
    duration_seconds = models.PositiveIntegerField(null=True, blank=True)

    total_questions = models.PositiveSmallIntegerField(default=0)
    total_points = models.PositiveIntegerField(default=0)
    max_possible_points = models.PositiveIntegerField(default=0)

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.IN_PROGRESS)
    is_structured = models.BooleanField(default=False)
    structure_variant = models.CharField(max_length=1, blank=True)

    class Meta:
        ordering = ['-started_at']

    def __str__(self):
        return f"Exam {self.pk} ({self.device_id})"

    @property
    def score_percentage(self):
        if not self.max_possible_points:
            return 0
        return round(self.total_points * 100 / self.max_possible_points, 2)


class ExamQuestion(models.Model):
    exam = models.ForeignKey(Exam, related_name='exam_questions', on_delete=models.CASCADE)
    question = models.ForeignKey(Question, related_name='exam_questions', on_delete=models.CASCADE)

    # 1-based position in the exam; decides the scoring grammar of a structured exam
    order = models.PositiveSmallIntegerField()
    question_type = models.CharField(max_length=20, choices=ScoringType.choices, default=ScoringType.SIMPLE)

    # Snapshot taken at creation so later edits to the bank do not rescore old exams
    correct_answer = models.CharField(max_length=64)
    max_points = models.PositiveSmallIntegerField(default=1)

    user_answer = models.CharField(max_length=64, null=True, blank=True)
    points_earned = models.PositiveSmallIntegerField(default=0)
    answered_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['order']
        unique_together = ('exam', 'question')

    def __str__(self):
        return f"{self.exam_id} #{self.order}"
