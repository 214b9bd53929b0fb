"""
Error taxonomy for the scoring service

RequestValidationError -> HTTP 400, UpstreamServiceError -> HTTP 500.
Malformed resume substructures are never errors; resume_schema absorbs them.
"""


class ScoringServiceError(Exception):
    """Base class for errors surfaced to API callers"""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'error': self.message}


class RequestValidationError(ScoringServiceError):
    """A required request field is absent or the body is not a JSON object"""
    status_code = 400


class UpstreamServiceError(ScoringServiceError):
    """The LLM call failed or returned content that does not match its contract"""
    status_code = 500
