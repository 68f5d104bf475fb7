from django.contrib import admin

from .models import Exam, ExamQuestion


class ExamQuestionInline(admin.TabularInline):
    model = ExamQuestion
    extra = 0
    readonly_fields = ['question', 'order', 'question_type', 'correct_answer', 'max_points',
                       'user_answer', 'points_earned', 'answered_at']


@admin.register(Exam)
class ExamAdmin(admin.ModelAdmin):
    list_display = ['id', 'device_id', 'status', 'is_structured', 'total_points', 'max_possible_points', 'started_at']
    list_filter = ['status', 'is_structured', 'language']
    search_fields = ['device_id']
    inlines = [ExamQuestionInline]
