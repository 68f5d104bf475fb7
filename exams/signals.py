# exams/signals.py
import logging

from django.apps import apps
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from questions.models import AnswerOption, Context, Question, Suboption

logger = logging.getLogger(__name__)


@receiver([post_save, post_delete], sender=Question)
@receiver([post_save, post_delete], sender=AnswerOption)
@receiver([post_save, post_delete], sender=Suboption)
@receiver([post_save, post_delete], sender=Context)
def clear_pool_cache(sender, **kwargs):
    apps.get_app_config('exams').pool_cache.clear()
    logger.debug("Pool cache cleared after %s change", sender.__name__)
