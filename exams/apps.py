# exams/apps.py
from django.apps import AppConfig
from django.conf import settings

from .cache import PoolCache


class ExamsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'exams'

    def ready(self):
        # Pool entries live in the shared "exam_pools" cache; cleared whenever the bank changes
        self.pool_cache = PoolCache(ttl_seconds=settings.EXAM_POOL_CACHE_TTL)
        from . import signals  # noqa: F401
