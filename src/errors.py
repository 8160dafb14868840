"""Exception types raised by the quiz generation pipeline."""


class QuizGenerationError(Exception):
    """Base class for every error surfaced by the generation pipeline."""


class InvalidInputError(QuizGenerationError):
    """Request is missing a file, options or title, or they are malformed."""


class InvalidOptionsError(QuizGenerationError):
    """Generation options cannot be turned into a task specification."""


class ExtractionError(QuizGenerationError):
    """Source document could not be decoded into text."""


class RemoteJobError(QuizGenerationError):
    """
    A step of the remote generation job failed.

    Args:
        message: Human-readable description of the failure
        status: Raw terminal run status when the failure is a run outcome
    """

    def __init__(self, message: str, status: str | None = None):
        super().__init__(message)
        self.status = status


class MalformedOutputError(QuizGenerationError):
    """Generator output does not parse into a valid quiz item set."""


# Errors caused by the caller rather than by the pipeline itself
CLIENT_ERRORS = (InvalidInputError, InvalidOptionsError)
