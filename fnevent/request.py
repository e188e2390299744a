import base64
import binascii
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union
from urllib.parse import parse_qs, urlparse

from .body import EMPTY, Binary, Body, Text


class EventError(ValueError):
    """The invocation event is not in the expected shape."""


@dataclass
class Request:
    method: str = "GET"
    path: str = "/"
    headers: Dict[str, str] = field(default_factory=dict)
    body: Body = EMPTY
    host: Optional[str] = None

    @classmethod
    def from_event(cls, event: Any) -> "Request":
        """Build a request from an invocation event.

        Accepts either the platform envelope ({"Action": "Invoke", "body": "<json>"})
        or the decoded payload dict directly.
        """
        if not isinstance(event, Mapping):
            raise EventError(f"Event must be an object, got {type(event).__name__}")
        payload: Any = event
        if "Action" in event:
            raw = event.get("body")
            if not isinstance(raw, str):
                raise EventError("Invoke envelope is missing its JSON body")
            try:
                payload = json.loads(raw)
            except ValueError as e:
                raise EventError(f"Invoke envelope body is not JSON: {e}") from e
            if not isinstance(payload, Mapping):
                raise EventError("Invoke envelope body must decode to an object")

        headers = payload.get("headers") or {}
        if not isinstance(headers, Mapping):
            raise EventError("headers must be an object")

        return cls(
            method=str(payload.get("method") or "GET").upper(),
            path=str(payload.get("path") or "/"),
            headers={str(k).lower(): str(v) for k, v in headers.items()},
            body=_decode_body(payload.get("body"), payload.get("encoding")),
            host=payload.get("host"),
        )

    @property
    def url_path(self) -> str:
        return urlparse(self.path).path

    @property
    def query(self) -> Dict[str, Union[str, List[str]]]:
        qs = parse_qs(urlparse(self.path).query, keep_blank_values=True)
        return {k: v if len(v) > 1 else v[0] for k, v in qs.items()}

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.headers.get(name.lower(), default)


def _decode_body(raw: Any, encoding: Any) -> Body:
    if raw is None:
        return EMPTY
    if not isinstance(raw, str):
        raise EventError(f"body must be a string, got {type(raw).__name__}")
    if encoding == "base64":
        try:
            return Binary(base64.b64decode(raw, validate=True))
        except binascii.Error as e:
            raise EventError(f"body is not valid base64: {e}") from e
    return Text(raw)
