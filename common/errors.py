# common/errors.py
"""
Error types shared by the intake pipeline, the submission store and the
notification adapters.

Client-facing errors derive from ``APIError`` and are rendered by the
application-level error handler registered in ``app.py``.
"""


class APIError(Exception):
    """Base class for errors that map directly to an HTTP response."""

    status_code = 400

    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload or {}

    def to_dict(self):
        response = {'success': False, 'error': self.message}
        response.update(self.payload)
        return response


class ValidationFailure(APIError):
    status_code = 400

    def __init__(self, errors, message='Validation failed'):
        super().__init__(message, payload={'errors': errors})
        self.errors = errors


class NotFound(APIError):
    status_code = 404


class DuplicateResource(APIError):
    status_code = 400


class RateLimitExceeded(APIError):
    status_code = 429

    def __init__(self, message, retry_after):
        super().__init__(message, payload={'retryAfter': retry_after})
        self.retry_after = retry_after


class TransportFailure(Exception):
    """A notification channel was called and the call failed."""

    def __init__(self, channel, message):
        super().__init__(message)
        self.channel = channel
        self.message = message


class DuplicateKeyError(Exception):
    """A unique index rejected an insert."""

    def __init__(self, model, key, value):
        super().__init__(f"Duplicate {model} for {key}={value}")
        self.model = model
        self.key = key
        self.value = value
