import base64
import binascii
import functools
import importlib
import importlib.util
import json
import logging
import sys
import threading
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Tuple

from .body import Binary, Body
from .http import bad_request, internal_server_error
from .request import EventError, Request
from .response import BASE64_ENCODING, ConversionError, EventResponse, Response


logger = logging.getLogger(__name__)

Handler = Callable[[Request], Any]


class HandlerError(RuntimeError):
    pass


_PY_CACHE_LOCK = threading.Lock()
_PY_MODULE_CACHE: Dict[str, Tuple[float, Callable]] = {}


def load_handler(entrypoint: str) -> Handler:
    """Resolve 'path/to/file.py:func' or 'package.module:func'."""
    module_ref, _, func_name = entrypoint.partition(":")
    if not module_ref or not func_name:
        raise HandlerError(f"Invalid entrypoint {entrypoint!r}; expected 'module:handler'")
    if module_ref.endswith(".py"):
        return _import_file_handler(Path(module_ref), func_name)
    try:
        mod = importlib.import_module(module_ref)
    except ImportError as e:
        raise HandlerError(f"Cannot import {module_ref}: {e}") from e
    return _get_callable(mod, func_name)


def _get_callable(mod: Any, func_name: str) -> Handler:
    handler = getattr(mod, func_name, None)
    if not callable(handler):
        raise HandlerError(f"{mod.__name__} has no callable {func_name!r}")
    return handler


def _import_file_handler(file_path: Path, func_name: str) -> Handler:
    file_path = file_path.resolve()
    try:
        mtime = file_path.stat().st_mtime
    except OSError as e:
        raise HandlerError(f"Cannot load module from {file_path}: {e}") from e
    cache_key = f"{file_path}:{func_name}"
    with _PY_CACHE_LOCK:
        cached = _PY_MODULE_CACHE.get(cache_key)
        if cached and cached[0] == mtime:
            return cached[1]
        # load fresh
        spec = importlib.util.spec_from_file_location(f"fnevent_{abs(hash(str(file_path)))}", str(file_path))
        if spec is None or spec.loader is None:
            raise HandlerError(f"Cannot load module from {file_path}")
        mod = importlib.util.module_from_spec(spec)
        sys.modules[spec.name] = mod
        try:
            spec.loader.exec_module(mod)  # type: ignore
        except Exception as e:
            sys.modules.pop(spec.name, None)
            raise HandlerError(f"Error loading {file_path}: {e!r}") from e
        handler = _get_callable(mod, func_name)
        _PY_MODULE_CACHE[cache_key] = (mtime, handler)
        return handler


def into_response(result: Any) -> Response:
    """Coerce whatever a handler returned into a Response."""
    if isinstance(result, Response):
        return result
    if result is None or isinstance(result, (Body, str, bytes, bytearray, memoryview)):
        return Response(body=Body.from_value(result))
    if isinstance(result, tuple) and len(result) == 3:
        status, headers, body = result
        return Response(status_code=int(status), headers=dict(headers or {}), body=body)
    if isinstance(result, Mapping) and "statusCode" in result:
        headers = dict(result.get("headers") or {})
        body = result.get("body")
        if isinstance(body, (dict, list)):
            if not any(k.lower() == "content-type" for k in headers):
                headers["content-type"] = "application/json"
            body = json.dumps(body)
        elif result.get("encoding") == BASE64_ENCODING and isinstance(body, str):
            try:
                body = Binary(base64.b64decode(body, validate=True))
            except binascii.Error as e:
                raise ValueError(f"body is not valid base64: {e}") from e
        return Response(status_code=int(result["statusCode"]), headers=headers, body=body)
    # any other JSON value; bool is an int subclass
    if isinstance(result, (Mapping, list, int, float)):
        return Response(
            headers={"content-type": "application/json"},
            body=json.dumps(result, allow_nan=False),
        )
    raise TypeError(f"Cannot turn {type(result).__name__} into a response")


def invoke(handler: Handler, event: Any) -> Dict[str, Any]:
    """Run `handler` against an invocation event and return the response event."""
    try:
        request = Request.from_event(event)
    except EventError as e:
        logger.warning("rejected invocation event", extra={"error": str(e)})
        return EventResponse.from_response(bad_request("Invalid event")).to_dict()

    try:
        response = into_response(handler(request))
    except Exception as e:
        response = internal_server_error(e)

    try:
        return EventResponse.from_response(response).to_dict()
    except ConversionError as e:
        return EventResponse.from_response(internal_server_error(e)).to_dict()


def lambda_handler(handler: Handler) -> Callable[[Any, Any], Dict[str, Any]]:
    """Wrap a request handler as a platform entry point `fn(event, context)`."""

    @functools.wraps(handler)
    def entry(event: Any, context: Any = None) -> Dict[str, Any]:
        return invoke(handler, event)

    return entry
