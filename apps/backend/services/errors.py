"""
Points errors.

Every failure raised by the ledger or the request layer is a CoreError with a
stable, human-readable message and the HTTP status the transport should use.
"""

from typing import Optional


class CoreError(Exception):
    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class InvalidBodyShape(CoreError):
    def __init__(self, message: str = "Invalid request: Invalid body length"):
        super().__init__(message)


class MissingField(CoreError):
    def __init__(self, message: str):
        super().__init__(message)


class InvalidFieldType(CoreError):
    def __init__(self, message: str):
        super().__init__(message)


class InvalidPoints(CoreError):
    def __init__(self, message: str = "Invalid request: Invalid points"):
        super().__init__(message)


class InsufficientPoints(CoreError):
    def __init__(
        self,
        requested: Optional[int] = None,
        available: Optional[int] = None,
        message: str = "Invalid request: Not enough points",
    ):
        self.requested = requested
        self.available = available
        super().__init__(message)


# Messages shared by the engine guards and the request layer
ADD_MISSING = "Invalid request: 'payer', 'points', or 'timestamp' is missing"
ADD_BAD_TYPES = "Invalid request: Invalid data types for payer, points, or timestamp"
SPEND_MISSING = "Invalid request: 'points' is missing"
SPEND_BAD_TYPE = "Invalid request: Invalid data type for points"
