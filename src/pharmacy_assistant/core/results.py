"""Result types used at the orchestrator boundary.

``Ok``/``Err`` carry the outcome of an internal step whose failure the caller may
choose to discard. ``ChatResult`` is the uniform shape every caller-facing
operation returns.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Generic, Optional, Tuple, Type, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E", bound=BaseException)


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def unwrap_or(self, default: T) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    error: E

    def is_ok(self) -> bool:
        return False

    def unwrap_or(self, default: T) -> T:
        return default


Result = Union[Ok[T], Err[E]]


def capture(
    fn: Callable[..., T],
    *args: Any,
    errors: Tuple[Type[BaseException], ...] = (Exception,),
    **kwargs: Any,
) -> Result:
    """
    Call ``fn`` and wrap its outcome.

    Only exceptions listed in ``errors`` are captured; anything else propagates.
    """
    try:
        return Ok(fn(*args, **kwargs))
    except errors as exc:
        return Err(exc)


class ResultStatus(str, Enum):
    """Tag carried by every caller-facing result."""

    OK = "ok"
    SESSION_NOT_FOUND = "session_not_found"
    NO_EMAIL_AVAILABLE = "no_email_available"
    LOOKUP_FAILED = "lookup_failed"
    FETCH_FAILED = "fetch_failed"
    REPLY_FAILED = "reply_failed"
    CALLBACK_FAILED = "callback_failed"
    EMAIL_FAILED = "email_failed"


@dataclass
class ChatResult:
    """Outcome of one orchestrator operation: a payload or a user-facing message."""

    success: bool
    status: ResultStatus
    message: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, message: Optional[str] = None, **data: Any) -> "ChatResult":
        return cls(success=True, status=ResultStatus.OK, message=message, data=data)

    @classmethod
    def fail(cls, status: ResultStatus, message: str) -> "ChatResult":
        return cls(success=False, status=status, message=message)

    @property
    def not_found(self) -> bool:
        return self.status is ResultStatus.SESSION_NOT_FOUND

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"success": self.success}
        if self.message is not None:
            body["message"] = self.message
        if not self.success:
            body["error"] = self.status.value
        body.update(self.data)
        return body


__all__ = ["Ok", "Err", "Result", "capture", "ResultStatus", "ChatResult"]
