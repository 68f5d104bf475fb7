from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),

    # --- Exam flow, history, stats and bank health ---
    path('api/', include('exams.urls')),

    # --- Question bank CRUD ---
    path('api/', include('questions.urls')),
]
