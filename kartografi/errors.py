from __future__ import annotations


class QuizError(Exception):
    status_code = 500


class QuizValidationError(QuizError):
    """Caller's fault; the message is safe to return to the client."""

    status_code = 400


class MissingParameterError(QuizValidationError):
    pass


class UnsupportedTypeError(QuizValidationError):
    pass


class MalformedKeyError(QuizValidationError):
    pass


class InvalidMetadataError(QuizValidationError):
    pass


class InvalidKeyError(QuizValidationError):
    pass


class UpstreamError(QuizError):
    pass


class UpstreamFetchError(UpstreamError):
    pass


class NoEligibleDataError(UpstreamError):
    pass
