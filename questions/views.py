import csv
import io
import logging

from django.db import transaction
from rest_framework import filters, permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response

from .models import Context, Question
from .serializers import ContextSerializer, QuestionSerializer

logger = logging.getLogger(__name__)


def _split_options(raw):
    return [part.strip() for part in (raw or '').split('|')]


def csv_row_to_data(row):
    """
    One CSV row to QuestionSerializer input.
    Header: text_ru, text_kz, answer, level, topic, context, options_ru, options_kz
    Options are separated by "|" and lettered A, B, C... in order.
    """
    options_ru = _split_options(row.get('options_ru'))
    options_kz = _split_options(row.get('options_kz'))
    count = max(len([o for o in options_ru if o]), len([o for o in options_kz if o]))
    options = []
    for index in range(count):
        options.append({
            'text_ru': options_ru[index] if index < len(options_ru) else None,
            'text_kz': options_kz[index] if index < len(options_kz) else None,
        })
    return {
        'text_ru': row.get('text_ru') or None,
        'text_kz': row.get('text_kz') or None,
        'answer': (row.get('answer') or '').strip(),
        'level': row.get('level') or None,
        'topic': row.get('topic') or None,
        'context': row.get('context') or None,
        'options': options,
    }


class QuestionViewSet(viewsets.ModelViewSet):
    queryset = Question.objects.select_related('context').prefetch_related('options__suboptions').order_by('-id')
    serializer_class = QuestionSerializer
    permission_classes = [permissions.AllowAny]

    # Enable Search and Filtering for the Question Bank
    filter_backends = [filters.SearchFilter]
    search_fields = ['text_ru', 'text_kz', 'topic']

    def get_queryset(self):
        queryset = super().get_queryset()
        params = self.request.query_params
        # ?topic=T1&level=2&context=5
        if params.get('topic'):
            queryset = queryset.filter(topic=params['topic'].upper())
        if params.get('level', '').isdigit():
            queryset = queryset.filter(level=params['level'])
        if params.get('context', '').isdigit():
            queryset = queryset.filter(context_id=params['context'])
        return queryset

    @action(detail=False, methods=['post'], url_path='bulk-upload', parser_classes=[MultiPartParser, FormParser])
    def bulk_upload(self, request):
        """
        Upload questions via CSV. Either every row is imported or none is.
        """
        file_obj = request.FILES.get('file')
        if not file_obj:
            return Response({"error": "No file uploaded"}, status=status.HTTP_400_BAD_REQUEST)

        try:
            decoded_file = file_obj.read().decode('utf-8-sig')
        except UnicodeDecodeError:
            return Response({"error": "File must be UTF-8 encoded"}, status=status.HTTP_400_BAD_REQUEST)

        reader = csv.DictReader(io.StringIO(decoded_file))
        errors = {}
        with transaction.atomic():
            created_count = 0
            for line, row in enumerate(reader, start=2):
                serializer = QuestionSerializer(data=csv_row_to_data(row))
                if serializer.is_valid():
                    serializer.save()
                    created_count += 1
                else:
                    errors[line] = serializer.errors
            if errors:
                transaction.set_rollback(True)

        if errors:
            return Response({"error": "Invalid rows", "rows": errors}, status=status.HTTP_400_BAD_REQUEST)

        logger.info("Imported %d questions from %s", created_count, file_obj.name)
        return Response({"status": f"Successfully uploaded {created_count} questions"}, status=status.HTTP_201_CREATED)


class ContextViewSet(viewsets.ModelViewSet):
    queryset = Context.objects.prefetch_related('questions').order_by('id')
    serializer_class = ContextSerializer
    permission_classes = [permissions.AllowAny]

    filter_backends = [filters.SearchFilter]
    search_fields = ['title', 'text']
