from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import ContextViewSet, QuestionViewSet

router = DefaultRouter()
router.register(r'questions', QuestionViewSet, basename='questions')
router.register(r'contexts', ContextViewSet, basename='contexts')

urlpatterns = [
    path('', include(router.urls)),
]
