# mathquiz_platform/questions/models.py
from django.db import models

OPTION_LETTERS = "ABCDEFGHIJKLM"


class Context(models.Model):
    """Reading passage shared by up to five questions."""
    title = models.CharField(max_length=255, blank=True)
    text = models.TextField()

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['id']

    def __str__(self):
        return self.title or f"Context {self.pk}"


class Question(models.Model):
    # Bilingual text: at least one of the two is filled
    text_ru = models.TextField(null=True, blank=True)
    text_kz = models.TextField(null=True, blank=True)

    # Raw correct answer. Grammar depends on the exam position: "A", "A,C" or "A1B2"
    answer = models.CharField(max_length=64)

    level = models.PositiveSmallIntegerField(null=True, blank=True)
    topic = models.CharField(max_length=10, blank=True, null=True, db_index=True)

    # Questions sharing a context are only used for the context section
    context = models.ForeignKey(Context, related_name='questions', on_delete=models.SET_NULL, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['id']

    def __str__(self):
        text = self.text_ru or self.text_kz or ""
        return f"{text[:50]}..."


class AnswerOption(models.Model):
    question = models.ForeignKey(Question, related_name='options', on_delete=models.CASCADE)
    letter = models.CharField(max_length=1)
    text_ru = models.TextField(null=True, blank=True)
    text_kz = models.TextField(null=True, blank=True)
    order = models.PositiveSmallIntegerField(default=0)

    class Meta:
        ordering = ['order', 'id']
        unique_together = ('question', 'letter')

    def __str__(self):
        return f"{self.letter}) {self.text_ru or self.text_kz or ''}"


class Suboption(models.Model):
    option = models.ForeignKey(AnswerOption, related_name='suboptions', on_delete=models.CASCADE)
    text = models.CharField(max_length=255)
    is_correct = models.BooleanField(default=False)
    order = models.PositiveSmallIntegerField(default=0)

    class Meta:
        ordering = ['order', 'id']
