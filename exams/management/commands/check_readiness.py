from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from exams.readiness import check_readiness
from exams.services import build_selector


class Command(BaseCommand):
    help = 'Checks whether the question bank can fill a structured 40-question exam'

    def add_arguments(self, parser):
        parser.add_argument('--language', default=settings.DEFAULT_LANGUAGE, help='ru or kz')
        parser.add_argument('--fail', action='store_true', help='Exit with an error when the bank is not ready')

    def handle(self, *args, **options):
        language = options['language']
        if language not in settings.SUPPORTED_LANGUAGES:
            raise CommandError(f"Unsupported language {language}, use one of: {', '.join(settings.SUPPORTED_LANGUAGES)}")

        report = check_readiness(build_selector(), language)

        for issue in report.issues:
            self.stdout.write(self.style.ERROR(issue))
        for warning in report.warnings:
            self.stdout.write(self.style.WARNING(warning))
        for action in report.recommended_actions:
            self.stdout.write(action)

        summary = f"Readiness score for {language}: {report.readiness_score}"
        if report.is_ready:
            self.stdout.write(self.style.SUCCESS(summary))
        elif options['fail']:
            raise CommandError(summary)
        else:
            self.stdout.write(self.style.ERROR(summary))
