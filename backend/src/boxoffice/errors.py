"""Domain errors raised by the service layer."""

from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    BAD_REQUEST = "BAD_REQUEST"


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode = ErrorCode.BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""

    code = ErrorCode.NOT_FOUND

    def __init__(self, entity: str, identifier: object, key: str = "ID") -> None:
        super().__init__(f"{entity} with {key} {identifier} not found")
        self.entity = entity
        self.identifier = identifier


class ConflictError(DomainError):
    """Raised on duplicate codes/names and overlapping slot times."""

    code = ErrorCode.CONFLICT


class CapacityExceededError(DomainError):
    """Raised when a booking would push a slot past its seat count."""

    code = ErrorCode.CAPACITY_EXCEEDED


class BadRequestError(DomainError):
    """Raised when a counter would go negative or a usage cap is exhausted."""

    code = ErrorCode.BAD_REQUEST
