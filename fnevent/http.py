"""Ready-made JSON responses for the common success and error cases.

Client errors come back as ordinary responses. `internal_server_error` logs
the underlying error and returns a generic body, so error detail stays in
the logs and never reaches the caller.
"""

import json
import logging
from dataclasses import asdict, dataclass
from typing import Any

from .body import Text
from .response import Response


logger = logging.getLogger(__name__)

JSON_HEADERS = {"content-type": "application/json"}


def _dumps(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), allow_nan=False)


def _json_response(status: int, text: str) -> Response:
    return Response(status_code=status, headers=dict(JSON_HEADERS), body=Text(text))


@dataclass(frozen=True)
class StructuredError:
    message: str
    code: str

    def to_body(self) -> Text:
        return Text(_dumps(asdict(self)))


def ok(value: Any) -> Response:
    """200 with `value` encoded as JSON.

    Raises TypeError for unserializable values, ValueError for NaN or infinity.
    """
    return _json_response(200, _dumps(value))


success = ok


def bad_request(message: str) -> Response:
    return _json_response(400, StructuredError(message, "bad_request").to_body().value)


def unauthorized() -> Response:
    return _json_response(401, StructuredError("Unauthorized", "unauthorized").to_body().value)


def endpoint_not_found() -> Response:
    """404: the requested endpoint does not exist."""
    return _json_response(404, StructuredError("Not found", "not_found").to_body().value)


def not_found() -> Response:
    """200 with {"found": false}: the lookup ran but matched nothing.

    Not the same as endpoint_not_found, which is a 404.
    """
    return _json_response(200, _dumps({"found": False}))


found_false = not_found


def internal_server_error(err: BaseException) -> Response:
    logger.error(
        "internal server error",
        extra={"error": repr(err), "error_type": type(err).__name__},
    )
    return _json_response(
        500,
        StructuredError("Internal server error", "internal_server_error").to_body().value,
    )
