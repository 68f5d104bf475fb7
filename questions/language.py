# mathquiz_platform/questions/language.py
"""
Resolves the content language of a request.

Priority: Accept-Language header, X-App-Language header, ?language=,
then `filters.language` in the request body. "ru-RU" is read as "ru".
"""
from django.conf import settings


class InvalidLanguage(ValueError):
    def __init__(self, raw):
        self.raw = raw
        super().__init__(f'Language "{raw}" is not supported')

    def as_response_data(self):
        valid = list(settings.SUPPORTED_LANGUAGES)
        return {
            "error": "Invalid language parameter",
            "message": f'Language "{self.raw}" is not supported. Must be one of: {", ".join(valid)}',
            "valid_languages": valid,
        }


def raw_language(request, filters=None):
    raw = (
        request.headers.get('Accept-Language')
        or request.headers.get('X-App-Language')
        or request.query_params.get('language')
    )
    if not raw and isinstance(filters, dict):
        raw = filters.get('language')
    return raw or None


def normalize_language(raw):
    return raw.strip().lower().split(',')[0].split('-')[0].split(';')[0]


def resolve_language(request, filters=None):
    """Validated language code; DEFAULT_LANGUAGE when none was sent. Raises InvalidLanguage."""
    raw = raw_language(request, filters)
    if raw is None:
        return settings.DEFAULT_LANGUAGE
    language = normalize_language(raw)
    if language not in settings.SUPPORTED_LANGUAGES:
        raise InvalidLanguage(raw)
    return language
