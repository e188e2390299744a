"""HTTP payload model: empty, UTF-8 text, or raw bytes."""

import base64
from dataclasses import dataclass
from typing import Any, Optional


class Body:
    """Base of the closed set of body variants: Empty, Text, Binary."""

    @staticmethod
    def from_value(value: Any) -> "Body":
        if value is None:
            return EMPTY
        if isinstance(value, Body):
            return value
        if isinstance(value, str):
            return Text(value)
        if isinstance(value, (bytes, bytearray, memoryview)):
            return Binary(value)
        raise TypeError(f"Cannot build a body from {type(value).__name__}")

    def is_empty(self) -> bool:
        return isinstance(self, Empty)

    def serialize(self) -> Optional[str]:
        raise NotImplementedError


@dataclass(frozen=True)
class Empty(Body):
    _instance = None

    def __new__(cls) -> "Empty":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def serialize(self) -> Optional[str]:
        return None


EMPTY = Empty()


@dataclass(frozen=True)
class Text(Body):
    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError(f"Text body requires str, got {type(self.value).__name__}")

    def serialize(self) -> Optional[str]:
        return self.value


@dataclass(frozen=True)
class Binary(Body):
    value: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.value, (bytes, bytearray, memoryview)):
            raise TypeError(f"Binary body requires bytes, got {type(self.value).__name__}")
        object.__setattr__(self, "value", bytes(self.value))

    def serialize(self) -> Optional[str]:
        # base64 on the wire; the event carries encoding="base64" alongside
        return base64.b64encode(self.value).decode("ascii")
