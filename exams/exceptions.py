# exams/exceptions.py
from rest_framework import status


class ExamError(Exception):
    """Base for errors the exam service reports back to the client."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Exam request failed"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ExamNotFound(ExamError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Exam not found"


class DeviceMismatch(ExamError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Exam belongs to another device"


class ExamAlreadySubmitted(ExamError):
    default_message = "Exam already submitted"


class InvalidQuestionCount(ExamError):
    default_message = "Invalid question count"


class NoQuestionsAvailable(ExamError):
    default_message = "No questions available in the requested language"


class NoQuestionsMatchFilters(ExamError):
    default_message = "No questions match the selected filters"
