# mathquiz_platform/exams/serializers.py
from rest_framework import serializers

from .models import Exam, ExamQuestion
from .services import HISTORY_DATE_FIELDS


def question_text(question, language):
    """Question text in `language`, falling back to the other language."""
    if language == 'kz':
        return question.text_kz or question.text_ru
    return question.text_ru or question.text_kz


# --- Request Serializers ---

class ExamFiltersSerializer(serializers.Serializer):
    topic = serializers.CharField(required=False, allow_blank=True)
    level = serializers.IntegerField(required=False, allow_null=True)
    language = serializers.CharField(required=False, allow_blank=True)


class StartExamSerializer(serializers.Serializer):
    device_id = serializers.CharField(max_length=255)
    question_count = serializers.IntegerField(default=40)
    filters = ExamFiltersSerializer(required=False)


class AnswerSerializer(serializers.Serializer):
    question_id = serializers.IntegerField()
    answer = serializers.CharField(max_length=64, required=False, allow_blank=True, allow_null=True)


class SubmitExamSerializer(serializers.Serializer):
    device_id = serializers.CharField(max_length=255)
    answers = AnswerSerializer(many=True, required=False)


class HistoryQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(required=False, min_value=1, max_value=200)
    date_field = serializers.ChoiceField(choices=HISTORY_DATE_FIELDS, default='completed_at')
    start_date = serializers.DateTimeField(required=False, input_formats=['iso-8601', '%Y-%m-%d'])
    end_date = serializers.DateTimeField(required=False, input_formats=['iso-8601', '%Y-%m-%d'])

    def validate(self, attrs):
        start, end = attrs.get('start_date'), attrs.get('end_date')
        if start and end and start > end:
            raise serializers.ValidationError({"start_date": "start_date must be before end_date"})
        return attrs


# --- Exam Serializers ---

class ExamSerializer(serializers.ModelSerializer):
    score_percentage = serializers.FloatField(read_only=True)

    class Meta:
        model = Exam
        fields = [
            'id', 'device_id', 'language', 'started_at', 'completed_at', 'duration_seconds',
            'total_questions', 'total_points', 'max_possible_points', 'score_percentage',
            'status', 'is_structured', 'structure_variant'
        ]
        read_only_fields = fields


class ExamQuestionResultSerializer(serializers.ModelSerializer):
    """Per-question result shown after submission."""
    question = serializers.SerializerMethodField()
    topic = serializers.CharField(source='question.topic', read_only=True)
    level = serializers.IntegerField(source='question.level', read_only=True)

    class Meta:
        model = ExamQuestion
        fields = [
            'question_id', 'order', 'question_type', 'question', 'topic', 'level',
            'user_answer', 'correct_answer', 'points_earned', 'max_points', 'answered_at'
        ]

    def get_question(self, obj):
        return question_text(obj.question, self.context.get('language'))


class ExamQuestionPaperSerializer(serializers.ModelSerializer):
    """A question as the candidate sees it: no correct answer."""
    question = serializers.SerializerMethodField()
    topic = serializers.CharField(source='question.topic', read_only=True)
    level = serializers.IntegerField(source='question.level', read_only=True)
    options = serializers.SerializerMethodField()
    context_id = serializers.IntegerField(source='question.context_id', read_only=True)
    context_title = serializers.SerializerMethodField()
    context_text = serializers.SerializerMethodField()

    class Meta:
        model = ExamQuestion
        fields = [
            'order', 'question_id', 'question_type', 'question', 'topic', 'level',
            'options', 'context_id', 'context_title', 'context_text', 'max_points'
        ]

    def get_question(self, obj):
        return question_text(obj.question, self.context.get('language'))

    def get_options(self, obj):
        language = self.context.get('language')
        return [
            {
                'letter': option.letter,
                'text': question_text(option, language),
                'suboptions': [sub.text for sub in option.suboptions.all()],
            }
            for option in obj.question.options.all()
        ]

    def get_context_title(self, obj):
        context = obj.question.context
        return context.title if context else None

    def get_context_text(self, obj):
        context = obj.question.context
        return context.text if context else None
