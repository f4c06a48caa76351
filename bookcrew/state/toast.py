"""Toast notifications and pending navigation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ToastKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Toast:
    message: str
    kind: ToastKind = ToastKind.SUCCESS

    def to_dict(self) -> dict:
        return {"message": self.message, "kind": self.kind.value}

    @classmethod
    def from_dict(cls, raw: dict) -> Toast:
        return cls(message=str(raw["message"]), kind=ToastKind(raw.get("kind", "success")))


@dataclass(frozen=True)
class Navigation:
    """A page transition requested by a handler."""

    url: str
    delay_ms: int = 0
    replace: bool = False
