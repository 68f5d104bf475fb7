import logging

from django.db.models import Prefetch
from rest_framework import permissions, status, views
from rest_framework.response import Response

from questions.language import InvalidLanguage, resolve_language
from questions.models import AnswerOption
from . import services
from .exceptions import ExamError
from .readiness import check_readiness
from .serializers import (
    ExamQuestionPaperSerializer, ExamQuestionResultSerializer, ExamSerializer,
    HistoryQuerySerializer, StartExamSerializer, SubmitExamSerializer,
)

logger = logging.getLogger(__name__)


class ExamAPIView(views.APIView):
    """Turns service and language errors into {"error": ...} responses."""
    permission_classes = [permissions.AllowAny]

    def handle_exception(self, exc):
        if isinstance(exc, ExamError):
            return Response({"error": exc.message}, status=exc.status_code)
        if isinstance(exc, InvalidLanguage):
            return Response(exc.as_response_data(), status=status.HTTP_400_BAD_REQUEST)
        return super().handle_exception(exc)


def detail_response_data(detail):
    context = {'language': detail.language}
    return {
        'exam': ExamSerializer(detail.exam).data,
        'questions': ExamQuestionResultSerializer(detail.rows, many=True, context=context).data,
    }


class StartExamView(ExamAPIView):
    """
    Device starts an exam.
    Payload: { "device_id": "...", "question_count": 40, "filters": {"topic": "T1", "level": 1} }
    """

    def post(self, request):
        serializer = StartExamSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        filters = data.get('filters') or {}

        language = resolve_language(request, request.data.get('filters'))
        started = services.start_exam(
            data['device_id'],
            question_count=data['question_count'],
            filters=filters,
            language=language,
        )

        body = {
            'exam_id': started.exam.id,
            'device_id': started.exam.device_id,
            'language': language,
            'total_questions': started.exam.total_questions,
            'question_ids': started.question_ids,
            'started_at': started.exam.started_at,
            'status': started.exam.status,
            'is_structured': started.is_structured,
        }
        if started.issues:
            body['structure_issues'] = started.issues
        if started.context_used is not None:
            body['context_used'] = started.context_used.id
        return Response(body, status=status.HTTP_201_CREATED)


class ExamQuestionsView(ExamAPIView):
    """Questions of an exam in the requested language, without answers."""

    def get(self, request, exam_id):
        language = resolve_language(request)
        exam = services.get_exam(exam_id)
        rows = exam.exam_questions.select_related('question__context').prefetch_related(
            Prefetch('question__options', queryset=AnswerOption.objects.order_by('order', 'id')),
            'question__options__suboptions',
        )
        serializer = ExamQuestionPaperSerializer(rows, many=True, context={'language': language})
        return Response(serializer.data)


class SubmitExamView(ExamAPIView):
    """
    Device submits answers; the response carries the scored results.
    Payload: { "device_id": "...", "answers": [ { "question_id": 1, "answer": "A" }, ... ] }
    """

    def post(self, request, exam_id):
        serializer = SubmitExamSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        language = resolve_language(request)

        services.submit_exam(
            exam_id,
            serializer.validated_data['device_id'],
            serializer.validated_data.get('answers', []),
        )
        return Response(detail_response_data(services.exam_detail(exam_id, language)))


class ExamDetailView(ExamAPIView):

    def get(self, request, exam_id):
        language = resolve_language(request)
        return Response(detail_response_data(services.exam_detail(exam_id, language)))


class ExamHistoryView(ExamAPIView):
    """Completed exams of a device, newest first. ?limit=&date_field=&start_date=&end_date="""

    def get(self, request, device_id):
        query = HistoryQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        exams = services.exam_history(
            device_id,
            limit=params.get('limit'),
            date_field=params['date_field'],
            start=params.get('start_date'),
            end=params.get('end_date'),
        )
        return Response(ExamSerializer(exams, many=True).data)


class DeviceStatsView(ExamAPIView):

    def get(self, request, device_id):
        return Response(services.device_stats(device_id))


class ReadinessView(ExamAPIView):
    """Whether the bank can fill a structured 40-question exam."""

    def get(self, request):
        language = resolve_language(request)
        report = check_readiness(services.build_selector(), language)
        if not report.is_ready:
            logger.warning("Question bank not ready for %s: %s", language, report.issues)
        return Response(report.as_dict())


class CacheStatsView(ExamAPIView):

    def get(self, request):
        stats = services.get_pool_cache().get_stats()
        hit_rate = f"{round(stats['valid'] * 100 / stats['total'])}%" if stats['total'] else "N/A"
        return Response({
            'cache': stats,
            'performance': {
                'message': 'Cache is working to accelerate exam generation',
                'hit_rate': hit_rate,
            },
        })
