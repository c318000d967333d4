"""Application errors mapped to HTTP responses by the exception handlers."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(eq=False)
class AppError(Exception):
    status_code: int
    message: str
    extra: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, **self.extra}


class BadRequestError(AppError):
    def __init__(self, message: str, **extra: Any):
        super().__init__(status_code=400, message=message, extra=extra)


class NotFoundError(AppError):
    def __init__(self, message: str):
        super().__init__(status_code=404, message=message)


class ConflictError(AppError):
    def __init__(self, message: str, conflicts: list[dict]):
        super().__init__(status_code=409, message=message, extra={"conflicts": conflicts})

    @property
    def conflicts(self) -> list[dict]:
        return self.extra["conflicts"]
