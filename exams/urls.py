from django.urls import path

from .views import (
    CacheStatsView, DeviceStatsView, ExamDetailView, ExamHistoryView,
    ExamQuestionsView, ReadinessView, StartExamView, SubmitExamView,
)

urlpatterns = [
    # Exam flow
    path('exams/start', StartExamView.as_view(), name='exam-start'),
    path('exams/<int:exam_id>/questions', ExamQuestionsView.as_view(), name='exam-questions'),
    path('exams/<int:exam_id>/submit', SubmitExamView.as_view(), name='exam-submit'),
    path('exams/<int:exam_id>', ExamDetailView.as_view(), name='exam-detail'),

    # History and statistics
    path('exams/history/<str:device_id>', ExamHistoryView.as_view(), name='exam-history'),
    path('users/<str:device_id>/stats', DeviceStatsView.as_view(), name='device-stats'),

    # Bank health
    path('exams/readiness', ReadinessView.as_view(), name='exam-readiness'),
    path('exams/cache-stats', CacheStatsView.as_view(), name='exam-cache-stats'),
]
