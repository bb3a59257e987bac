"""Errors raised by the challenge app. The controller turns them into notices."""


class DailyChallengeError(Exception):
    """Base class; the message is shown to the user as-is."""


class ValidationError(DailyChallengeError):
    pass


class AuthenticationError(DailyChallengeError):
    pass


class AccessDeniedError(DailyChallengeError):
    def __init__(self, message: str = "Access denied: admin privileges required."):
        super().__init__(message)


class NotFoundError(DailyChallengeError):
    pass


class DuplicateSubmissionError(DailyChallengeError):
    pass
