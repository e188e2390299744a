import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

from .body import EMPTY, Binary, Body, Empty, Text


BASE64_ENCODING = "base64"

# RFC 7230 token characters
_HEADER_NAME = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")

HeaderValue = Union[str, bytes]


class ConversionError(RuntimeError):
    """A response could not be represented as an invocation event."""


def _normalize_headers(headers: Optional[Mapping[str, HeaderValue]]) -> Dict[str, HeaderValue]:
    out: Dict[str, HeaderValue] = {}
    for name, value in (headers or {}).items():
        out[str(name).lower()] = value
    return out


@dataclass
class Response:
    """Generic HTTP response handed back by a handler."""

    status_code: int = 200
    headers: Dict[str, HeaderValue] = field(default_factory=dict)
    body: Body = EMPTY

    def __post_init__(self) -> None:
        self.headers = _normalize_headers(self.headers)
        self.body = Body.from_value(self.body)

    def set_header(self, name: str, value: HeaderValue) -> "Response":
        self.headers[name.lower()] = value
        return self


def _header_str(name: str, value: HeaderValue) -> str:
    if not _HEADER_NAME.match(name):
        raise ConversionError(f"Invalid header name {name!r}")
    if isinstance(value, (bytes, bytearray)):
        try:
            value = bytes(value).decode("ascii")
        except UnicodeDecodeError as e:
            raise ConversionError(f"Header {name!r} is not valid ASCII: {e}") from e
    if not isinstance(value, str):
        raise ConversionError(f"Header {name!r} has non-string value of type {type(value).__name__}")
    for ch in value:
        if ch != "\t" and not (" " <= ch <= "~"):
            raise ConversionError(f"Header {name!r} contains invalid character {ch!r}")
    return value


@dataclass
class EventResponse:
    """Wire representation of a response, as the platform expects it."""

    status_code: int = 200
    headers: Dict[str, HeaderValue] = field(default_factory=dict)
    body: Optional[Body] = None
    encoding: Optional[str] = None

    def __post_init__(self) -> None:
        # body is absent iff empty; encoding is set iff the body is binary
        body = None if self.body is None else Body.from_value(self.body)
        self.body = None if isinstance(body, Empty) else body
        self.encoding = BASE64_ENCODING if isinstance(self.body, Binary) else None

    @classmethod
    def from_response(cls, response: Response) -> "EventResponse":
        body = response.body
        if isinstance(body, Empty):
            encoding, wire_body = None, None
        elif isinstance(body, Text):
            encoding, wire_body = None, body
        elif isinstance(body, Binary):
            encoding, wire_body = BASE64_ENCODING, body
        else:
            raise TypeError(f"Unknown body variant {type(body).__name__}")
        return cls(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=wire_body,
            encoding=encoding,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the event dict, leaving out absent fields.

        Raises ConversionError if a header cannot be sent as a string.
        """
        event: Dict[str, Any] = {"statusCode": self.status_code}
        if self.headers:
            event["headers"] = {name: _header_str(name, value) for name, value in self.headers.items()}
        body = self.body
        if body is not None and not isinstance(body, Empty):
            event["body"] = body.serialize()
        if isinstance(body, Binary):
            event["encoding"] = BASE64_ENCODING
        return event

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))


def to_event(response: Response) -> Dict[str, Any]:
    return EventResponse.from_response(response).to_dict()
