# fanbase/errors.py
"""Domain errors raised by services and mapped to HTTP responses in main.py"""


class FanbaseError(Exception):
    status_code = 500
    code = "server_error"

    def __init__(self, message: str = "Internal server error", code: str = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class InputValidationError(FanbaseError, ValueError):
    status_code = 400
    code = "invalid_input"


class RateLimitExceededError(FanbaseError):
    status_code = 429
    code = "too_many_requests"

    def __init__(self, message: str = "Too many requests. Please try again later."):
        super().__init__(message)


class NotFoundError(FanbaseError):
    status_code = 404
    code = "not_found"


class DuplicateRecordError(FanbaseError):
    """Raised by repositories when a unique constraint rejects an insert"""
    status_code = 409
    code = "duplicate"
