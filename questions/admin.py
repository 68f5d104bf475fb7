from django.contrib import admin

# Register your models here.
from .models import AnswerOption, Context, Question, Suboption

admin.site.register(Context)
admin.site.register(Question)
admin.site.register(AnswerOption)
admin.site.register(Suboption)
