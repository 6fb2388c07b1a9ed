# models/errors.py

class ValidationError(Exception):
    """Invalid field value; ``reason`` is a machine-readable code."""

    def __init__(self, reason: str, message: str = None):
        super().__init__(message or reason)
        self.reason = reason
