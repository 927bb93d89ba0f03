"""Domain errors translated to HTTP responses in app.main"""


class InvalidFeeInput(ValueError):
    """Raised by the fee calculator for a price or vehicle type it cannot price."""


class RateLimitExceeded(Exception):

    def __init__(self, retry_after: int, message: str = "Too many requests. Please try again later."):
        super().__init__(message)
        self.retry_after = retry_after
        self.message = message
