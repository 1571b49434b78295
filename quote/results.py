"""Stage outcomes for the render/assembly chain."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ErrorKind(Enum):
    """Failure kinds that abort a quote request."""
    RENDER = "render"
    MERGE = "merge"


class RenderError(Exception):
    """A page could not be rendered (navigation error, crash or deadline)."""


class MergeError(Exception):
    """A buffer could not be read as a PDF during assembly."""


@dataclass(frozen=True)
class StageFailure:
    kind: ErrorKind
    stage: str
    message: str


@dataclass(frozen=True)
class StageResult:
    value: Any = None
    failure: Optional[StageFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: Any) -> "StageResult":
        return cls(value=value)

    @classmethod
    def failed(cls, kind: ErrorKind, stage: str, message: str) -> "StageResult":
        return cls(failure=StageFailure(kind, stage, message))
