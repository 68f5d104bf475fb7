# mathquiz_platform/questions/serializers.py
from django.db import transaction
from rest_framework import serializers

from .models import OPTION_LETTERS, AnswerOption, Context, Question, Suboption


# --- Helper Serializers ---

class SuboptionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Suboption
        fields = ['id', 'text', 'is_correct', 'order']
        read_only_fields = ['id']


class AnswerOptionSerializer(serializers.ModelSerializer):
    suboptions = SuboptionSerializer(many=True, required=False)

    class Meta:
        model = AnswerOption
        fields = ['id', 'letter', 'text_ru', 'text_kz', 'order', 'suboptions']
        read_only_fields = ['id', 'letter', 'order']


class ContextSerializer(serializers.ModelSerializer):
    question_count = serializers.IntegerField(source='questions.count', read_only=True)

    class Meta:
        model = Context
        fields = ['id', 'title', 'text', 'question_count', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']


# --- Question Serializers ---

class QuestionSerializer(serializers.ModelSerializer):
    options = AnswerOptionSerializer(many=True)
    context_title = serializers.CharField(source='context.title', read_only=True, allow_null=True)

    class Meta:
        model = Question
        fields = [
            'id', 'text_ru', 'text_kz', 'answer', 'level', 'topic',
            'context', 'context_title', 'options', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']

    def validate_options(self, value):
        if not value:
            raise serializers.ValidationError("At least one answer option is required")
        if len(value) > len(OPTION_LETTERS):
            raise serializers.ValidationError(f"Maximum {len(OPTION_LETTERS)} answer options allowed")
        return value

    def validate_topic(self, value):
        return value.strip().upper() if value else value

    def validate(self, attrs):
        text_ru = attrs.get('text_ru', getattr(self.instance, 'text_ru', None))
        text_kz = attrs.get('text_kz', getattr(self.instance, 'text_kz', None))
        if not (text_ru or '').strip() and not (text_kz or '').strip():
            raise serializers.ValidationError({"text_ru": "Question text is required in at least one language"})
        return attrs

    def _write_options(self, question, options_data):
        # Letters follow the option order: A, B, C, ...
        for index, option_data in enumerate(options_data):
            suboptions_data = option_data.pop('suboptions', [])
            option = AnswerOption.objects.create(
                question=question, letter=OPTION_LETTERS[index], order=index, **option_data
            )
            for sub_index, sub_data in enumerate(suboptions_data):
                sub_data.setdefault('order', sub_index)
                Suboption.objects.create(option=option, **sub_data)

    @transaction.atomic
    def create(self, validated_data):
        options_data = validated_data.pop('options', [])
        question = Question.objects.create(**validated_data)
        self._write_options(question, options_data)
        return question

    @transaction.atomic
    def update(self, instance, validated_data):
        options_data = validated_data.pop('options', None)
        instance = super().update(instance, validated_data)
        if options_data is not None:
            instance.options.all().delete()
            self._write_options(instance, options_data)
        return instance
